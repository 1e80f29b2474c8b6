# resilient_locator/selectors/locator.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from playwright.sync_api import Page

from resilient_locator.selectors.errors import ElementNotFound, NotInteractable
from resilient_locator.selectors.requests import (
    CheckboxRequest,
    InputRequest,
    LocatorRequest,
    RadioRequest,
)
from resilient_locator.selectors.strategy import (
    CHECKBOX_STRATEGIES,
    INPUT_STRATEGIES,
    RADIO_STRATEGIES,
    CascadeHit,
    Strategy,
    run_cascade,
)
from resilient_locator.selectors.surface import DomSurface, PlaywrightSurface
from resilient_locator.utils.logger import get_logger
from resilient_locator.utils.timing import Stopwatch, WaitPolicy, WaitTimeout

log = get_logger(__name__)


@dataclass
class Resolution:
    """Outcome of one successful lookup."""
    request: LocatorRequest
    handle: Any
    strategy: str
    index: int      # position of the winning strategy; 0 = primary
    elapsed_ms: int
    ticks: int

    @property
    def used_fallback(self) -> bool:
        return self.index > 0


class ResilientLocator:
    """
    Finds form controls by what the user sees rather than by markup details.

    Every lookup runs an ordered cascade of strategies (label first,
    attribute fallbacks after) and re-runs the whole cascade on each poll
    tick until one strategy yields an element or the wait policy's deadline
    passes. Nothing is cached between calls.

    Usage:
        >>> locator = ResilientLocator.for_page(page, timeout_ms=15000)
        >>> first = locator.find_input_by_label("First Name", placeholder="First Name", name="firstname")
        >>> male = locator.find_radio_by_label_and_value("Gender", "Male")
        >>> locator.wait_for_clickable(male).click()
    """

    def __init__(
        self,
        surface: DomSurface,
        timeout_ms: Optional[int] = None,
        *,
        interval_ms: Optional[int] = None,
        policy: Optional[WaitPolicy] = None,
    ) -> None:
        base = policy or WaitPolicy.from_settings()
        self.surface = surface
        self.policy = WaitPolicy(
            timeout_ms=base.timeout_ms if timeout_ms is None else timeout_ms,
            interval_ms=base.interval_ms if interval_ms is None else interval_ms,
        )

    @classmethod
    def for_page(cls, page: Page, timeout_ms: Optional[int] = None, **kwargs: Any) -> "ResilientLocator":
        return cls(PlaywrightSurface(page), timeout_ms, **kwargs)

    # ---------- Resolution (handle + how it was found) ----------

    def resolve_input(
        self,
        label_text: str,
        placeholder: Optional[str] = None,
        name: Optional[str] = None,
        id: Optional[str] = None,
    ) -> Resolution:
        request = InputRequest(label_text, placeholder=placeholder, name=name, id=id)
        return self._resolve(request, INPUT_STRATEGIES)

    def resolve_radio(self, group_label: str, option_text: str) -> Resolution:
        return self._resolve(RadioRequest(group_label, option_text), RADIO_STRATEGIES)

    def resolve_checkbox(self, label_text: str) -> Resolution:
        return self._resolve(CheckboxRequest(label_text), CHECKBOX_STRATEGIES)

    # ---------- Public lookups ----------

    def find_input_by_label(
        self,
        label_text: str,
        placeholder: Optional[str] = None,
        name: Optional[str] = None,
        id: Optional[str] = None,
    ) -> Any:
        """
        Single-line input by label text.
        Order: label (`for` target, sibling, subtree) → placeholder → name → id.

        Raises:
            ElementNotFound: no strategy matched before the deadline.
        """
        return self.resolve_input(label_text, placeholder=placeholder, name=name, id=id).handle

    def find_radio_by_label_and_value(self, group_label: str, option_text: str) -> Any:
        """
        Radio option by its visible text. `group_label` is only used in messages.
        Order: id guess → nearby text → label → value attribute.
        """
        return self.resolve_radio(group_label, option_text).handle

    def find_checkbox_by_label(self, label_text: str) -> Any:
        """Checkbox by label text, falling back to its value attribute."""
        return self.resolve_checkbox(label_text).handle

    def wait_for_clickable(self, handle: Any) -> Any:
        """
        Block until `handle` is visible and enabled, then return it.
        The element is not looked up again.

        Raises:
            NotInteractable: still hidden or disabled at the deadline.
        """
        def _ready() -> bool:
            return self.surface.is_visible(handle) and self.surface.is_enabled(handle)

        try:
            self.policy.until(_ready, description="element visible and enabled")
        except WaitTimeout as e:
            raise NotInteractable(self.policy.timeout_ms) from e
        return handle

    # ---------- Internals ----------

    def _resolve(self, request: LocatorRequest, strategies: Sequence[Strategy]) -> Resolution:
        ticks = 0

        def _tick() -> Optional[CascadeHit]:
            nonlocal ticks
            ticks += 1
            return run_cascade(self.surface, request, strategies)

        with Stopwatch() as sw:
            try:
                hit = self.policy.until(_tick, description=request.describe())
            except WaitTimeout as e:
                log.error(f"Could not find {request.describe()} after {ticks} attempt(s) in {sw.elapsed_ms()} ms")
                raise ElementNotFound(request.describe(), timeout_ms=self.policy.timeout_ms) from e

        resolution = Resolution(
            request=request,
            handle=hit.handle,
            strategy=hit.strategy.name,
            index=hit.index,
            elapsed_ms=sw.elapsed_ms(),
            ticks=ticks,
        )
        if resolution.used_fallback:
            log.warning(
                f"{request.describe()} resolved by fallback strategy "
                f"'{hit.strategy.name}' (primary '{strategies[0].name}' found nothing)"
            )
        else:
            log.debug(f"{request.describe()} resolved by '{hit.strategy.name}' in {resolution.elapsed_ms} ms")
        return resolution


__all__ = ["ResilientLocator", "Resolution"]
