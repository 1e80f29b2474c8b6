# resilient_locator/selectors/__init__.py
"""
Selectors package
-----------------
Label-first element lookup for form controls: request types, the DOM surfaces
lookups run against, the strategy cascades, and the locator tying them to a
wait policy.
"""

from .errors import ElementNotFound, LocatorError, NotInteractable
from .locator import ResilientLocator, Resolution
from .requests import CheckboxRequest, InputRequest, RadioRequest
from .static_surface import StaticHtmlSurface
from .surface import DomSurface, PlaywrightSurface, xpath_literal

__all__ = [
    "ResilientLocator",
    "Resolution",
    "InputRequest",
    "RadioRequest",
    "CheckboxRequest",
    "DomSurface",
    "PlaywrightSurface",
    "StaticHtmlSurface",
    "xpath_literal",
    "LocatorError",
    "ElementNotFound",
    "NotInteractable",
]
