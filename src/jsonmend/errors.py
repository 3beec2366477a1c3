"""Exceptions raised by jsonmend."""

from __future__ import annotations


class JsonMendError(Exception):
    """Base class for jsonmend errors."""


class StructuralParseError(JsonMendError):
    """The normalized text could not be parsed as JSON.

    ``offset`` is the character index into the parsed text, or ``None`` when
    the parser did not report one.
    """

    def __init__(
        self,
        message: str,
        offset: int | None = None,
        lineno: int | None = None,
        colno: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.lineno = lineno
        self.colno = colno

    @property
    def summary(self) -> str:
        """One-line description for status bars."""
        if self.lineno is not None and self.colno is not None:
            return (
                f"JSON Parse Error: {self.message} "
                f"(line {self.lineno}, col {self.colno})"
            )
        return f"JSON Parse Error: {self.message}"


class UnknownBlockError(JsonMendError, KeyError):
    """A collapse operation named a block id that is not in the index."""

    def __init__(self, block_id: int) -> None:
        super().__init__(block_id)
        self.block_id = block_id

    def __str__(self) -> str:
        return f"unknown block id: {self.block_id}"
