"""Error taxonomy for rejected writes.

Every constraint the schema declares can fail in one of three ways: a value
outside its domain, a reference to a missing parent row, or a duplicate key.
Driver-level ``IntegrityError`` instances are mapped onto those classes by
:func:`translate_integrity_error` so callers never have to inspect dialect
specific messages.
"""

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

# SQLSTATE class 23 codes (PostgreSQL, and drivers that follow the standard).
_SQLSTATE_NOT_NULL = "23502"
_SQLSTATE_FOREIGN_KEY = "23503"
_SQLSTATE_UNIQUE = "23505"
_SQLSTATE_CHECK = "23514"

# MySQL/MariaDB error numbers.
_MYSQL_DUPLICATE = 1062
_MYSQL_NO_PARENT = 1452
_MYSQL_CHECK = 3819


class IntegrityViolation(Exception):
    """A write was rejected; the offending change was not applied."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class DomainViolation(IntegrityViolation):
    pass


class ReferentialViolation(IntegrityViolation):
    pass


class UniquenessViolation(IntegrityViolation):
    pass


class CascadeIntegrityError(IntegrityViolation):
    """Dependent rows survived the deletion of their parent."""


class RecordNotFound(LookupError):
    def __init__(self, entity: str, key):
        super().__init__(f"{entity} {key} not found")
        self.entity = entity
        self.key = key


class SequenceExhaustedError(RuntimeError):
    """The sequence reached its maximum value. It does not cycle."""


def _driver_code(orig):
    for attr in ("sqlstate", "pgcode"):
        code = getattr(orig, attr, None)
        if code:
            return str(code)
    args = getattr(orig, "args", ())
    if args and isinstance(args[0], int):
        return args[0]
    return None


def classify_integrity_error(exc: IntegrityError) -> type[IntegrityViolation]:
    orig = exc.orig
    code = _driver_code(orig)
    if code in (_SQLSTATE_CHECK, _SQLSTATE_NOT_NULL, _MYSQL_CHECK):
        return DomainViolation
    if code in (_SQLSTATE_UNIQUE, _MYSQL_DUPLICATE):
        return UniquenessViolation
    if code in (_SQLSTATE_FOREIGN_KEY, _MYSQL_NO_PARENT):
        return ReferentialViolation

    message = str(orig).upper()
    if "CHECK CONSTRAINT" in message or "NOT NULL CONSTRAINT" in message:
        return DomainViolation
    if "UNIQUE CONSTRAINT" in message or "PRIMARY KEY" in message:
        return UniquenessViolation
    if "FOREIGN KEY" in message:
        return ReferentialViolation
    return IntegrityViolation


def translate_integrity_error(exc: IntegrityError) -> IntegrityViolation:
    error_cls = classify_integrity_error(exc)
    return error_cls(str(exc.orig))


def domain_error_from_validation(exc: ValidationError) -> DomainViolation:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return DomainViolation("; ".join(problems) or str(exc))


__all__ = [
    "CascadeIntegrityError",
    "DomainViolation",
    "IntegrityViolation",
    "RecordNotFound",
    "ReferentialViolation",
    "SequenceExhaustedError",
    "UniquenessViolation",
    "classify_integrity_error",
    "domain_error_from_validation",
    "translate_integrity_error",
]
