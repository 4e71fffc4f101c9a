"""Result values returned across the public service boundary.

Ledger and tracker services never let domain exceptions escape. Each public
operation runs through :func:`attempt`, which turns the exception into a
failed :class:`Result` tagged with an :class:`ErrorKind`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError

from shared.errors import AlreadyExistsError, SequenceContentionError

logger = structlog.get_logger(__name__)


class ErrorKind(Enum):
    VALIDATION = "Validation"
    NOT_FOUND = "Not_Found"
    ALREADY_EXISTS = "Already_Exists"
    CONTENTION = "Contention"
    STORE = "Store"


@dataclass(frozen=True)
class Result:
    success: bool
    value: Any = None
    message: str = ""
    error: ErrorKind | None = None
    cause: str | None = None

    @classmethod
    def ok(cls, value=None, message: str = "") -> "Result":
        return cls(success=True, value=value, message=message)

    @classmethod
    def fail(cls, error: ErrorKind, message: str, cause: str | None = None) -> "Result":
        return cls(success=False, error=error, message=message, cause=cause)

    @property
    def failed(self) -> bool:
        return not self.success


def describe(exc: Exception) -> str:
    """Flatten a Protean exception's ``messages`` into one readable line."""
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        parts = []
        for field_name, errors in messages.items():
            if isinstance(errors, (list, tuple)):
                errors = "; ".join(str(e) for e in errors)
            parts.append(f"{field_name}: {errors}")
        return ", ".join(parts)
    if messages:
        return str(messages)
    return str(exc)


def attempt(action: Callable[[], Any], *, operation: str, message: str = "") -> Result:
    """Run ``action`` and wrap its outcome in a :class:`Result`.

    Expected conditions (bad input, missing records, duplicates, allocation
    contention) come back as tagged failures. Anything else is treated as a
    store failure: it is logged and reported with a generic message.
    """
    try:
        return Result.ok(action(), message=message)
    except ValidationError as exc:
        return Result.fail(ErrorKind.VALIDATION, describe(exc))
    except ObjectNotFoundError as exc:
        return Result.fail(ErrorKind.NOT_FOUND, describe(exc))
    except AlreadyExistsError as exc:
        return Result.fail(ErrorKind.ALREADY_EXISTS, str(exc))
    except SequenceContentionError as exc:
        logger.warning("Order number allocation exhausted", operation=operation, attempts=exc.attempts)
        return Result.fail(ErrorKind.CONTENTION, str(exc))
    except Exception as exc:
        logger.exception("Store operation failed", operation=operation)
        return Result.fail(ErrorKind.STORE, f"{operation} failed", cause=str(exc))
