"""Exceptions raised by the XOEngine core."""

from __future__ import annotations


class XOEngineError(Exception):
    """Base class for every error the engine raises."""


class InvalidMove(XOEngineError, ValueError):
    """A mark was placed on an occupied or non-existent cell, or out of turn."""


class NoLegalMove(XOEngineError, RuntimeError):
    """A move was requested on a board with no blank cell left."""


class UnsupportedDifficulty(XOEngineError, ValueError):
    """The requested difficulty has no move selection policy."""


class InvalidPlayer(XOEngineError, ValueError):
    """A value other than the human or the computer was given as a player."""
