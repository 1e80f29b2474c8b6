# resilient_locator/selectors/requests.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


def _require_text(value: str, field: str) -> str:
    if value is None or not str(value).strip():
        raise ValueError(f"{field} cannot be empty")
    return value


@dataclass(frozen=True)
class InputRequest:
    """Single-line input identified by its label, with optional attribute fallbacks."""
    label_text: str
    placeholder: Optional[str] = None
    name: Optional[str] = None
    id: Optional[str] = None

    def __post_init__(self) -> None:
        _require_text(self.label_text, "label_text")

    def describe(self) -> str:
        return f"input with label '{self.label_text}'"


@dataclass(frozen=True)
class RadioRequest:
    """Radio option identified by its visible text; `group_label` only shows up in messages."""
    group_label: str
    option_text: str

    def __post_init__(self) -> None:
        _require_text(self.option_text, "option_text")

    def describe(self) -> str:
        return f"radio option '{self.option_text}' in group '{self.group_label}'"


@dataclass(frozen=True)
class CheckboxRequest:
    label_text: str

    def __post_init__(self) -> None:
        _require_text(self.label_text, "label_text")

    def describe(self) -> str:
        return f"checkbox with label '{self.label_text}'"


LocatorRequest = Union[InputRequest, RadioRequest, CheckboxRequest]


__all__ = [
    "InputRequest",
    "RadioRequest",
    "CheckboxRequest",
    "LocatorRequest",
]
