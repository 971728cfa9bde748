"""
Tic-tac-toe over a timeline.

Each node of the timeline is a board; the single ``move`` transformation
places a mark. Branching a board plays an alternative move, editing a board
rewrites the move that produced it and replays every later board.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Literal

from pydantic import BaseModel, Field

from timeline.core.errors import TransformationError
from timeline.core.ids import INITIAL_ID

BOARD_SIZE = 9

WIN_LINES = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


class CellState(str, Enum):
    EMPTY = " "
    X = "X"
    O = "O"  # noqa: E741


class MoveKind(str, Enum):
    """What clicking a board does for the current player."""

    IMPOSSIBLE = "impossible"
    BRANCH = "branch"
    EDIT = "edit"


class BoardState(BaseModel):
    board: List[CellState] = Field(default_factory=lambda: [CellState.EMPTY] * BOARD_SIZE)
    move_index: int = 0
    move_character: CellState = CellState.EMPTY

    def render(self) -> str:
        """Three rows of cells, empty cells as dots."""
        cells = [c.value if c != CellState.EMPTY else "." for c in self.board]
        return "\n".join("".join(cells[row * 3 : row * 3 + 3]) for row in range(3))


def create_initial_board() -> BoardState:
    return BoardState()


def move(board: BoardState, index: int, character: str) -> BoardState:
    """Place ``character`` at ``index``. Rejects illegal moves with TransformationError."""
    try:
        mark = CellState(character)
    except ValueError:
        raise TransformationError(f"Unknown mark {character!r}") from None
    if mark == CellState.EMPTY:
        raise TransformationError("Cannot place an empty mark")
    if isinstance(index, bool) or not isinstance(index, int):
        raise TransformationError(f"Index {index!r} is not a board cell")
    if not 0 <= index < BOARD_SIZE:
        raise TransformationError(f"Index {index} is outside the board")

    if board.move_character == mark:
        raise TransformationError(f"{mark.value} doing 2 moves in a row")

    if board.board[index] != CellState.EMPTY:
        raise TransformationError(f"Index {index} is already occupied")

    board.board[index] = mark
    board.move_index = index
    board.move_character = mark

    return board


TRANSFORMATIONS = {"move": move}


def is_winner(board: BoardState, player: CellState) -> bool:
    return any(all(board.board[i] == player for i in line) for line in WIN_LINES)


def count_wins(boards: Iterable[BoardState], player: CellState) -> int:
    """Number of boards on which ``player`` completed a line."""
    return sum(1 for board in boards if is_winner(board, player))


def game_outcome(cache: Dict[str, BoardState]) -> tuple[Literal["x", "o", "tie", "none"], int, int]:
    """
    Summarize wins across every played board of a timeline.

    Returns:
        (verdict, x_wins, o_wins) where verdict is "x", "o", "tie" or "none"
    """
    played = [board for node_id, board in cache.items() if node_id != INITIAL_ID and board.move_character != CellState.EMPTY]
    x_wins = count_wins(played, CellState.X)
    o_wins = count_wins(played, CellState.O)

    if x_wins and o_wins:
        return "tie", x_wins, o_wins
    if x_wins:
        return "x", x_wins, o_wins
    if o_wins:
        return "o", x_wins, o_wins
    return "none", x_wins, o_wins


def next_move_kind(board: BoardState, player: CellState) -> MoveKind:
    """
    Decide whether ``player`` acting on ``board`` branches or edits.

    X opens the game, so O cannot act on an empty board. A player whose mark
    made the board's last move edits that move; otherwise they branch.
    """
    if player == CellState.O and board.move_character == CellState.EMPTY:
        return MoveKind.IMPOSSIBLE
    if player != board.move_character:
        return MoveKind.BRANCH
    return MoveKind.EDIT
