"""
Shared fixtures for timeline tests.
"""

import pytest

from tests.helpers import ARITHMETIC
from timeline.core import SequentialIds, Timeline
from timeline.games.tictactoe import TRANSFORMATIONS, create_initial_board


@pytest.fixture
def arithmetic_timeline() -> Timeline:
    """Timeline over integers starting at 1 with sequential ids n0, n1, ..."""
    return Timeline(ARITHMETIC, lambda: 1, id_factory=SequentialIds("n"))


@pytest.fixture
def board_timeline() -> Timeline:
    """Tic-tac-toe timeline with sequential ids state0, state1, ..."""
    return Timeline(TRANSFORMATIONS, create_initial_board, id_factory=SequentialIds())
