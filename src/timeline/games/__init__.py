"""Example domains driven by the timeline engine."""
