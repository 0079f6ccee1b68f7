"""
Tagged operation outcome — ``Ok(value)`` or ``Err(error)``.

Every public operation in this package returns one of these instead of
raising for expected failures. An outcome is never partially valid:
``Ok`` has no error, ``Err`` has no value.

Usage:
    outcome = service.transfer(asset_id, to_address)
    if outcome.is_ok:
        signature = outcome.value
    else:
        print(outcome.error.kind)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from bubblegum_client.errors import OperationError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    @property
    def is_err(self) -> bool:
        return False


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying a classified OperationError."""

    error: OperationError

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def is_err(self) -> bool:
        return True


Outcome = Ok[T] | Err
