"""Core rules and move history for tic-tac-toe with time travel."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

Player = str  # "X" or "O"
Cell = Optional[Player]  # None for empty
Board = Tuple[Cell, ...]

EMPTY_BOARD: Board = (None,) * 9

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


def calculate_winner(squares: Sequence[Cell]) -> Optional[Player]:
    """Return the mark owning the first complete line, or ``None``."""
    for a, b, c in WINNING_LINES:
        v = squares[a]
        if v and v == squares[b] == squares[c]:
            return v
    return None


def _is_index(value: object, size: int) -> bool:
    # bool is an int subclass but never a square or step
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 <= value < size
    )


def board_rows(board: Sequence[Cell]) -> List[List[Cell]]:
    return [list(board[row : row + 3]) for row in (0, 3, 6)]


# ---------- Game ----------


@dataclass
class GameState:
    history: List[Board] = field(default_factory=lambda: [EMPTY_BOARD])
    # Index of the snapshot currently displayed
    step_number: int = 0
    x_is_next: bool = True

    # ---- transitions ----

    def apply_move(self, index: int) -> bool:
        """Place the next mark on the displayed board.

        Moves onto an occupied square, off the board, or after the displayed
        board already has a winner are ignored and return ``False``. A move
        made after rewinding drops every snapshot past ``step_number``.
        """
        if not _is_index(index, 9):
            return False

        history = self.history[: self.step_number + 1]
        squares = list(history[-1])
        if calculate_winner(squares) or squares[index]:
            return False

        squares[index] = "X" if self.x_is_next else "O"
        self.history = history + [tuple(squares)]
        self.step_number = len(history)
        self.x_is_next = not self.x_is_next
        return True

    def jump_to(self, step: int) -> bool:
        """Display snapshot ``step``; out-of-range steps are ignored."""
        if not _is_index(step, len(self.history)):
            return False
        self.step_number = step
        self.x_is_next = step % 2 == 0
        return True

    # ---- queries ----

    def current_board(self) -> Board:
        return self.history[self.step_number]

    def winner(self) -> Optional[Player]:
        return calculate_winner(self.current_board())

    def next_player(self) -> Player:
        return "X" if self.x_is_next else "O"

    def status_text(self) -> str:
        winner = self.winner()
        if winner:
            return f"Winner: {winner}"
        return f"Next player: {self.next_player()}"

    def move_list(self) -> List[Tuple[str, int]]:
        """Labels for every recorded step, paired with the step to jump to."""
        moves: List[Tuple[str, int]] = []
        for move in range(len(self.history)):
            label = f"Go to move #{move}" if move else "Go to game start"
            moves.append((label, move))
        return moves
