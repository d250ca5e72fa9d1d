"""Error type shared by all blocks."""

from __future__ import annotations


class BlockError(Exception):
    """An error with an optional human readable message and an optional cause."""

    def __init__(self, message: str | None = None, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        text = self.message if self.message is not None else "Error"
        if self.cause is not None:
            text += f". Cause: {self.cause}"
        return text