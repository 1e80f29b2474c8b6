# resilient_locator/selectors/errors.py
from __future__ import annotations

from typing import Optional


class LocatorError(RuntimeError):
    pass


class ElementNotFound(LocatorError):
    """Every strategy of a cascade came up empty until the deadline."""

    def __init__(self, reason: str, timeout_ms: Optional[int] = None) -> None:
        super().__init__(f"Could not find {reason}")
        self.reason = reason
        self.timeout_ms = timeout_ms


class NotInteractable(LocatorError):
    """A located element never became visible and enabled before the deadline."""

    def __init__(self, timeout_ms: int, description: str = "element") -> None:
        super().__init__(f"{description} was not visible and enabled within {timeout_ms} ms")
        self.timeout_ms = timeout_ms
        self.description = description
