# resilient_locator/selectors/surface.py
from __future__ import annotations

"""DOM query surfaces
--------------------
The locator only talks to a `DomSurface`: a handful of read-only queries
(XPath lookup, attributes, visibility) plus the few interactions a scenario
runner needs after a handle is resolved. `PlaywrightSurface` drives a live
browser page; `StaticHtmlSurface` (see static_surface.py) works on saved HTML.
"""

from typing import Any, Dict, Optional, Protocol, runtime_checkable

from playwright.sync_api import ElementHandle, Page

from resilient_locator.utils.config import get_settings


def xpath_literal(text: str) -> str:
    """
    Quote `text` as an XPath 1.0 string literal.

    XPath has no escape sequences, so text holding both quote kinds is
    stitched together with concat().
    """
    if "'" not in text:
        return f"'{text}'"
    if '"' not in text:
        return f'"{text}"'
    parts = text.split("'")
    pieces = []
    for i, part in enumerate(parts):
        if part:
            pieces.append(f"'{part}'")
        if i < len(parts) - 1:
            pieces.append('"\'"')
    return "concat(" + ", ".join(pieces) + ")"


@runtime_checkable
class DomSurface(Protocol):
    """Whatever can answer DOM queries for the locator. Handles are opaque."""

    def query(self, xpath: str, within: Any = None) -> Optional[Any]:
        """First element matching `xpath` in document order, or None."""
        ...

    def find_by_id(self, value: str) -> Optional[Any]: ...

    def find_by_name(self, value: str) -> Optional[Any]: ...

    def get_attribute(self, handle: Any, name: str) -> Optional[str]: ...

    def is_visible(self, handle: Any) -> bool: ...

    def is_enabled(self, handle: Any) -> bool: ...

    def is_checked(self, handle: Any) -> bool: ...

    def click(self, handle: Any) -> None: ...

    def fill(self, handle: Any, text: str) -> None: ...

    def input_value(self, handle: Any) -> str: ...

    def goto(self, url: str) -> None: ...

    def describe(self, handle: Any) -> Dict[str, Optional[str]]: ...


_DESCRIBE_JS = """
e => ({
  tag: e.tagName.toLowerCase(),
  id: e.getAttribute('id'),
  name: e.getAttribute('name'),
  type: e.getAttribute('type'),
  value: e.getAttribute('value'),
  placeholder: e.getAttribute('placeholder'),
})
"""


class PlaywrightSurface:
    """
    DomSurface over a Playwright sync `Page`.

    Handles are `ElementHandle`s pinned to the node that matched, so a
    resolved handle keeps pointing at the same element until the page
    navigates or the node detaches.
    """

    def __init__(self, page: Page, *, navigation_timeout_ms: Optional[int] = None) -> None:
        self.page = page
        self.navigation_timeout_ms = (
            navigation_timeout_ms if navigation_timeout_ms is not None else get_settings().PAGE_LOAD_TIMEOUT
        )

    # ---------- queries ----------

    def query(self, xpath: str, within: Optional[ElementHandle] = None) -> Optional[ElementHandle]:
        root = within if within is not None else self.page
        return root.query_selector(f"xpath={xpath}")

    def find_by_id(self, value: str) -> Optional[ElementHandle]:
        return self.query(f"//*[@id={xpath_literal(value)}]")

    def find_by_name(self, value: str) -> Optional[ElementHandle]:
        return self.query(f"//*[@name={xpath_literal(value)}]")

    def get_attribute(self, handle: ElementHandle, name: str) -> Optional[str]:
        return handle.get_attribute(name)

    def is_visible(self, handle: ElementHandle) -> bool:
        return handle.is_visible()

    def is_enabled(self, handle: ElementHandle) -> bool:
        return handle.is_enabled()

    def is_checked(self, handle: ElementHandle) -> bool:
        return handle.is_checked()

    def input_value(self, handle: ElementHandle) -> str:
        return handle.input_value()

    def describe(self, handle: ElementHandle) -> Dict[str, Optional[str]]:
        return handle.evaluate(_DESCRIBE_JS)

    # ---------- interactions (scenario runner only) ----------

    def click(self, handle: ElementHandle) -> None:
        handle.click()

    def fill(self, handle: ElementHandle, text: str) -> None:
        handle.fill(text)

    def goto(self, url: str) -> None:
        self.page.goto(url, wait_until="domcontentloaded", timeout=self.navigation_timeout_ms)


__all__ = ["DomSurface", "PlaywrightSurface", "xpath_literal"]
