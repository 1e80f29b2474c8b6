# resilient_locator/selectors/static_surface.py
from __future__ import annotations

"""Static HTML surface
---------------------
An lxml-backed DomSurface for saved pages. Lookups use real XPath 1.0, so a
cascade resolves here exactly as it would in a browser; interactions model
only what form checks need (typing, checkbox toggling, radio groups).
"""

import re
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import unquote, urlparse

from lxml import etree
from lxml import html as lxml_html
from lxml.html import HtmlElement

from resilient_locator.selectors.errors import NotInteractable
from resilient_locator.selectors.surface import xpath_literal
from resilient_locator.utils.logger import get_logger

log = get_logger(__name__)

_HIDDEN_STYLE = re.compile(r"(display\s*:\s*none|visibility\s*:\s*hidden)", re.IGNORECASE)
_DISABLEABLE = {"input", "button", "select", "textarea", "option", "optgroup", "fieldset"}


def _is_element(node) -> bool:
    return isinstance(node, etree._Element) and isinstance(node.tag, str)


class StaticHtmlSurface:
    """DomSurface over an in-memory lxml document."""

    def __init__(self, html: str, *, source: Optional[str] = None) -> None:
        self.source = source
        self.root: HtmlElement = lxml_html.document_fromstring(html)

    @classmethod
    def from_file(cls, path: Path | str) -> "StaticHtmlSurface":
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"HTML file not found: {p}")
        return cls(p.read_text(encoding="utf-8"), source=str(p.resolve()))

    def set_content(self, html: str) -> None:
        """Replace the whole document (old handles stop matching anything)."""
        self.root = lxml_html.document_fromstring(html)

    # ---------- queries ----------

    def query(self, xpath: str, within: Optional[HtmlElement] = None) -> Optional[HtmlElement]:
        ctx = within if within is not None else self.root
        result = ctx.xpath(xpath)
        if not isinstance(result, list):
            return None
        for node in result:
            if _is_element(node):
                return node
        return None

    def find_by_id(self, value: str) -> Optional[HtmlElement]:
        return self.query(f"//*[@id={xpath_literal(value)}]")

    def find_by_name(self, value: str) -> Optional[HtmlElement]:
        return self.query(f"//*[@name={xpath_literal(value)}]")

    def get_attribute(self, handle: HtmlElement, name: str) -> Optional[str]:
        return handle.get(name)

    def is_visible(self, handle: HtmlElement) -> bool:
        if not self._attached(handle):
            return False
        if handle.tag == "input" and (handle.get("type") or "").lower() == "hidden":
            return False
        node = handle
        while node is not None:
            if "hidden" in node.attrib:
                return False
            if _HIDDEN_STYLE.search(node.get("style") or ""):
                return False
            node = node.getparent()
        return True

    def is_enabled(self, handle: HtmlElement) -> bool:
        if handle.tag not in _DISABLEABLE:
            return True
        if "disabled" in handle.attrib:
            return False
        for anc in handle.iterancestors("fieldset"):
            if "disabled" in anc.attrib:
                return False
        return True

    def is_checked(self, handle: HtmlElement) -> bool:
        return "checked" in handle.attrib

    def input_value(self, handle: HtmlElement) -> str:
        if handle.tag == "textarea":
            return handle.text or ""
        return handle.get("value") or ""

    def describe(self, handle: HtmlElement) -> Dict[str, Optional[str]]:
        return {
            "tag": handle.tag,
            "id": handle.get("id"),
            "name": handle.get("name"),
            "type": handle.get("type"),
            "value": handle.get("value"),
            "placeholder": handle.get("placeholder"),
        }

    # ---------- interactions ----------

    def click(self, handle: HtmlElement) -> None:
        self._ensure_interactable(handle, "click")
        if handle.tag != "input":
            return
        kind = (handle.get("type") or "").lower()
        if kind == "checkbox":
            if self.is_checked(handle):
                del handle.attrib["checked"]
            else:
                handle.set("checked", "checked")
        elif kind == "radio":
            for other in self._radio_group(handle):
                if other is not handle and "checked" in other.attrib:
                    del other.attrib["checked"]
            handle.set("checked", "checked")

    def fill(self, handle: HtmlElement, text: str) -> None:
        self._ensure_interactable(handle, "fill")
        if handle.tag == "textarea":
            handle.text = text
        else:
            handle.set("value", text)

    def goto(self, url: str) -> None:
        parsed = urlparse(url)
        if parsed.scheme in ("", "file"):
            path = unquote(parsed.path) if parsed.scheme == "file" else url
            fresh = StaticHtmlSurface.from_file(path)
            self.root = fresh.root
            self.source = fresh.source
            log.debug(f"Loaded static page {self.source}")
            return
        raise ValueError(f"StaticHtmlSurface can only open local files, got {url!r}")

    # ---------- internals ----------

    def _attached(self, handle: HtmlElement) -> bool:
        return handle.getroottree().getroot() is self.root

    def _ensure_interactable(self, handle: HtmlElement, what: str) -> None:
        if not (self.is_visible(handle) and self.is_enabled(handle)):
            raise NotInteractable(0, description=f"<{handle.tag}> ({what})")

    def _radio_group(self, handle: HtmlElement):
        name = handle.get("name")
        if not name:
            return [handle]
        form = next(handle.iterancestors("form"), None)
        scope = form if form is not None else self.root
        # radios in a nested/other form belong to that form's group
        return [
            el for el in scope.xpath(f".//input[@type='radio' and @name={xpath_literal(name)}]")
            if next(el.iterancestors("form"), None) is form
        ]


__all__ = ["StaticHtmlSurface"]
