"""Exception hierarchy shared by the instruction parsers and helpers."""

from __future__ import annotations


class InstructionError(Exception):
    """Base class for errors raised by ``rc_instructions``."""


class InvalidInputError(InstructionError, TypeError):
    """Raised when instruction text is not a string."""


class InstructionConfigError(InstructionError, ValueError):
    """Raised when the instruction configuration file is invalid."""


class MediaFetchError(InstructionError, RuntimeError):
    """Raised when instruction media cannot be downloaded."""


__all__ = [
    "InstructionConfigError",
    "InstructionError",
    "InvalidInputError",
    "MediaFetchError",
]
