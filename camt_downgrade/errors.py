#!/usr/bin/env python3

from __future__ import annotations


class ConversionError(ValueError):
    """Base class for everything that can go wrong while converting a statement.

    Args:
      message: A human readable description of the fault.
      path: The element path of the offending input region, e.g.
        ``Document/BkToCstmrStmt/Stmt[1]/Ntry[2]/Amt``.
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(f"{message} (at {path})" if path else message)


class ParseError(ConversionError):
    """The source document could not be read into a statement."""


class MalformedInput(ParseError):
    """The input is not well-formed XML."""


class MissingMandatoryField(ParseError):
    """A structurally required element is absent from the source document."""


class UnsupportedValue(ParseError):
    """A value is present, but in a form that cannot be interpreted."""


class EmissionFailure(ConversionError):
    """The target tree could not be serialized."""
