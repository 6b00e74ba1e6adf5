"""Custom exceptions for datomic-flare."""

from __future__ import annotations

from typing import Any


class FlareError(Exception):
    """Base exception for datomic-flare."""


class EncodingError(FlareError, ValueError):
    """A value or tag could not be translated to EDN."""


class UnsupportedValueError(EncodingError):
    """A Python value has no EDN literal form."""

    def __init__(self, message: str, value: Any = None):
        self.value = value
        self.type_name = type(value).__name__
        super().__init__(message)


class _UnknownTokenError(EncodingError):
    def __init__(self, message: str, token: Any = None):
        self.token = token
        super().__init__(message)


class UnknownTypeError(_UnknownTokenError):
    """Unknown value type tag or Datomic value type identifier."""


class UnknownCardinalityError(_UnknownTokenError):
    """Unknown cardinality tag or identifier."""


class UnknownUniquenessError(_UnknownTokenError):
    """Unknown uniqueness tag or identifier."""


class PayloadShapeError(FlareError):
    """An outgoing payload is missing a position it must have."""


class UnrecognizedOperationError(FlareError):
    """The operation path is not one Flare exposes."""


class RequestError(FlareError):
    """HTTP request to Flare failed.

    Attributes:
        request: The underlying httpx exception or response.
        payload: The payload that was being sent.
    """

    def __init__(self, message: str, *, request: Any = None, payload: Any = None):
        self.request = request
        self.payload = payload
        super().__init__(message)


class FlareConnectionError(RequestError):
    """Connection/network errors."""


class EDNParseError(FlareError):
    """EDN parsing errors."""
