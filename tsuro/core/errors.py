from __future__ import annotations


class InvariantError(AssertionError):
    """Raised when a caller breaks a precondition of the board engine.

    These are not game outcomes: once one is raised the board can no longer be
    trusted and the game should be abandoned.
    """
