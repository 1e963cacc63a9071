"""Business outcomes returned by the store and services.

Expected conditions (missing record, referential conflict, bad foreign key,
ownership mismatch) come back as a ``Failure`` value instead of an exception.
Only unexpected backing-store errors propagate.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    VALIDATION = "validation"


_STATUS = {
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.VALIDATION: 400,
}


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str

    @property
    def status_code(self) -> int:
        return _STATUS[self.kind]


Result = Union[T, Failure]


def unauthorized(message: str = "Unauthorized") -> Failure:
    return Failure(ErrorKind.UNAUTHORIZED, message)


def forbidden(message: str = "Forbidden") -> Failure:
    return Failure(ErrorKind.FORBIDDEN, message)


def not_found(message: str) -> Failure:
    return Failure(ErrorKind.NOT_FOUND, message)


def conflict(message: str) -> Failure:
    return Failure(ErrorKind.CONFLICT, message)


def invalid(message: str) -> Failure:
    return Failure(ErrorKind.VALIDATION, message)
