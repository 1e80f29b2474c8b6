# resilient_locator/selectors/strategy.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from resilient_locator.selectors.requests import CheckboxRequest, InputRequest, RadioRequest
from resilient_locator.selectors.surface import DomSurface, xpath_literal
from resilient_locator.utils.logger import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class Strategy:
    """One named lookup: (surface, request) -> handle or None. Read-only."""
    name: str
    fn: Callable[[DomSurface, Any], Optional[Any]]

    def __call__(self, surface: DomSurface, request: Any) -> Optional[Any]:
        return self.fn(surface, request)


@dataclass
class CascadeHit:
    strategy: Strategy
    index: int
    handle: Any


def run_cascade(surface: DomSurface, request: Any, strategies: Sequence[Strategy]) -> Optional[CascadeHit]:
    """
    Evaluate `strategies` left to right and return the first handle found.

    A strategy that raises counts as a miss; the error is only logged.
    """
    for idx, strategy in enumerate(strategies):
        try:
            handle = strategy(surface, request)
        except Exception as e:
            log.debug(f"[{idx}] {strategy.name} raised for {request.describe()}: {e!r}")
            continue
        if handle is not None:
            return CascadeHit(strategy=strategy, index=idx, handle=handle)
        log.debug(f"[{idx}] {strategy.name}: no match for {request.describe()}")
    return None


# ---------- Shared label traversal ----------

def _has_type(surface: DomSurface, handle: Any, control_type: str) -> bool:
    return (surface.get_attribute(handle, "type") or "").strip().lower() == control_type


def _label_containing(surface: DomSurface, text: str) -> Optional[Any]:
    return surface.query(f"//label[contains(normalize-space(text()), {xpath_literal(text)})]")


def _label_control(surface: DomSurface, text: str, control_type: str) -> Optional[Any]:
    """
    Control of `control_type` tied to the first label containing `text`:
    its `for` target, else the nearest preceding sibling, the nearest
    following sibling, or the first one inside the label.
    """
    label = _label_containing(surface, text)
    if label is None:
        return None

    for_id = surface.get_attribute(label, "for")
    if for_id:
        target = surface.find_by_id(for_id)
        if target is not None and _has_type(surface, target, control_type):
            return target
        return None

    t = xpath_literal(control_type)
    for rel in (
        f"preceding-sibling::input[@type={t}][1]",
        f"following-sibling::input[@type={t}][1]",
        f".//input[@type={t}]",
    ):
        handle = surface.query(rel, within=label)
        if handle is not None:
            return handle
    return None


# ---------- Input strategies ----------

def _input_by_label(surface: DomSurface, req: InputRequest) -> Optional[Any]:
    label = _label_containing(surface, req.label_text)
    if label is None:
        return None

    for_id = surface.get_attribute(label, "for")
    if for_id:
        return surface.find_by_id(for_id)

    for rel in (".//input", "following-sibling::input[1]"):
        handle = surface.query(rel, within=label)
        if handle is not None:
            return handle
    return None


def _input_by_placeholder(surface: DomSurface, req: InputRequest) -> Optional[Any]:
    if not req.placeholder:
        return None
    return surface.query(f"//input[@placeholder={xpath_literal(req.placeholder)}]")


def _input_by_name(surface: DomSurface, req: InputRequest) -> Optional[Any]:
    if not req.name:
        return None
    return surface.find_by_name(req.name)


def _input_by_id(surface: DomSurface, req: InputRequest) -> Optional[Any]:
    if not req.id:
        return None
    return surface.find_by_id(req.id)


INPUT_STRATEGIES: tuple[Strategy, ...] = (
    Strategy("label", _input_by_label),
    Strategy("placeholder", _input_by_placeholder),
    Strategy("name", _input_by_name),
    Strategy("id", _input_by_id),
)


# ---------- Radio strategies ----------

def _radio_by_id_guess(surface: DomSurface, req: RadioRequest) -> Optional[Any]:
    handle = surface.find_by_id(req.option_text.lower())
    if handle is not None and _has_type(surface, handle, "radio"):
        return handle
    return None


def _radio_by_text_proximity(surface: DomSurface, req: RadioRequest) -> Optional[Any]:
    # first qualifying text node in document order wins
    text = xpath_literal(req.option_text)
    radio = "input[@type='radio']"
    return surface.query(
        f"(//text()[contains(normalize-space(.), {text})][preceding-sibling::{radio}])[1]"
        f"/preceding-sibling::{radio}[1]"
    )


def _radio_by_label(surface: DomSurface, req: RadioRequest) -> Optional[Any]:
    return _label_control(surface, req.option_text, "radio")


def _radio_by_value(surface: DomSurface, req: RadioRequest) -> Optional[Any]:
    return surface.query(f"//input[@type='radio' and @value={xpath_literal(req.option_text)}]")


RADIO_STRATEGIES: tuple[Strategy, ...] = (
    Strategy("id-guess", _radio_by_id_guess),
    Strategy("text-proximity", _radio_by_text_proximity),
    Strategy("label", _radio_by_label),
    Strategy("value", _radio_by_value),
)


# ---------- Checkbox strategies ----------

def _checkbox_by_label(surface: DomSurface, req: CheckboxRequest) -> Optional[Any]:
    return _label_control(surface, req.label_text, "checkbox")


def _checkbox_by_value(surface: DomSurface, req: CheckboxRequest) -> Optional[Any]:
    return surface.query(f"//input[@type='checkbox' and @value={xpath_literal(req.label_text)}]")


CHECKBOX_STRATEGIES: tuple[Strategy, ...] = (
    Strategy("label", _checkbox_by_label),
    Strategy("value", _checkbox_by_value),
)
