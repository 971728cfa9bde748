from .errors import LoaderError

__all__ = ["LoaderError"]
