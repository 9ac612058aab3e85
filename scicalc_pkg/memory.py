"""Memory register: a single persistent numeric slot (MS / M+ / M- / MR / MC).

The register outlives individual evaluations and is never reset between
expressions. Every operation holds the register's lock, so concurrent
callers cannot lose updates between add/subtract/recall.
"""

from __future__ import annotations

import math
import threading
from enum import Enum
from typing import Any, Callable

from .logging_config import get_logger
from .types import InvalidOperand, MathError, MathErrorKind

logger = get_logger("memory")


class MemoryStatus(Enum):
    """Indicator state reported to observers after each mutation."""

    ACTIVE = "ACTIVE"
    EMPTY = "EMPTY"


MemoryObserver = Callable[[MemoryStatus, float], None]


def _operand(value: Any) -> float:
    """Validate a memory operand and return it as a float."""
    if isinstance(value, bool):
        raise InvalidOperand(f"Memory operand must be a number, got {value!r}")
    try:
        number = float(value)
    except OverflowError:
        # No repr: huge ints exceed the int -> str conversion limit
        raise InvalidOperand("Memory operand is out of the representable range") from None
    except (TypeError, ValueError):
        raise InvalidOperand(
            f"Memory operand must be a number, got {value!r}"
        ) from None
    if not math.isfinite(number):
        raise InvalidOperand(f"Memory operand must be finite, got {number!r}")
    return number


class MemoryRegister:
    """Thread-safe single-value register, initially 0.0."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0.0
        self._observers: list[MemoryObserver] = []

    def subscribe(self, observer: MemoryObserver) -> None:
        """Register a callback invoked with (status, value) after every mutation."""
        with self._lock:
            self._observers.append(observer)

    def unsubscribe(self, observer: MemoryObserver) -> None:
        with self._lock:
            self._observers.remove(observer)

    def store(self, value: Any) -> None:
        """Overwrite the register."""
        number = _operand(value)
        with self._lock:
            self._value = number
            observers = list(self._observers)
        logger.info("Memory stored: %r", number)
        self._notify(observers, MemoryStatus.ACTIVE, number)

    def add(self, value: Any) -> None:
        """Add to the register (M+)."""
        self._accumulate(_operand(value), "added")

    def subtract(self, value: Any) -> None:
        """Subtract from the register (M-)."""
        self._accumulate(-_operand(value), "subtracted")

    def recall(self) -> float:
        """Read the register (MR). Never fails."""
        with self._lock:
            value = self._value
        logger.debug("Memory recalled: %r", value)
        return value

    def clear(self) -> None:
        """Reset the register to 0.0 and report EMPTY (MC)."""
        with self._lock:
            self._value = 0.0
            observers = list(self._observers)
        logger.info("Memory cleared")
        self._notify(observers, MemoryStatus.EMPTY, 0.0)

    def _accumulate(self, delta: float, verb: str) -> None:
        with self._lock:
            updated = self._value + delta
            if not math.isfinite(updated):
                raise MathError(
                    MathErrorKind.OVERFLOW,
                    f"memory value would leave the representable range ({self._value!r} + {delta!r})",
                )
            self._value = updated
            observers = list(self._observers)
        logger.info("Memory %s: %r (now %r)", verb, abs(delta), updated)
        self._notify(observers, MemoryStatus.ACTIVE, updated)

    @staticmethod
    def _notify(observers: list[MemoryObserver], status: MemoryStatus, value: float) -> None:
        # Called outside the lock so observers may read the register
        for observer in observers:
            observer(status, value)


_default_register: MemoryRegister | None = None
_default_lock = threading.Lock()


def default_register() -> MemoryRegister:
    """Return the process-wide register, creating it on first use."""
    global _default_register
    with _default_lock:
        if _default_register is None:
            _default_register = MemoryRegister()
        return _default_register


def store(value: Any) -> None:
    default_register().store(value)


def add(value: Any) -> None:
    default_register().add(value)


def subtract(value: Any) -> None:
    default_register().subtract(value)


def recall() -> float:
    return default_register().recall()


def clear() -> None:
    default_register().clear()
