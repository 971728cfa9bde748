"""Formatting helpers for CLI presentation."""

from __future__ import annotations

from typing import Callable, List

from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from timeline.core.ids import INITIAL_ID
from timeline.core.models import States
from timeline.core.projections import TreeViewNode
from timeline.io.session_loader import OperationReport


def build_operations_table(reports: List[OperationReport]) -> Table:
    table = Table(title="Operations")
    table.add_column("#", justify="right")
    table.add_column("Operation")
    table.add_column("Node")
    table.add_column("Status")
    table.add_column("Detail")

    for idx, report in enumerate(reports, start=1):
        status_color = "green" if report.applied else "red"
        status = "applied" if report.applied else "rejected"
        if report.failures:
            detail = "; ".join(f.describe() for f in report.failures)
        else:
            detail = report.message or ""
        table.add_row(
            str(idx),
            escape(report.operation.describe()),
            report.node_id or "-",
            f"[{status_color}]{status}[/{status_color}]",
            escape(detail),
        )
    return table


def build_state_tree(root: TreeViewNode, states: States, render_data: Callable[[object], str] = str) -> Tree:
    """Mirror a tree view as a rich Tree labelled with recipes and rendered values."""

    def _label(node: TreeViewNode) -> str:
        body = escape(render_data(node.data)) if node.data is not None else "[dim]<not derived>[/dim]"
        if node.id == INITIAL_ID:
            return f"[bold]{INITIAL_ID}[/bold]\n{body}"
        recipe = escape(states[node.id].describe()) if node.id in states else "?"
        return f"[bold]{node.id}[/bold] [cyan]{recipe}[/cyan]\n{body}"

    tree = Tree(_label(root))

    def _add(branch: Tree, node: TreeViewNode) -> None:
        for child in node.children:
            _add(branch.add(_label(child)), child)

    _add(tree, root)
    return tree
