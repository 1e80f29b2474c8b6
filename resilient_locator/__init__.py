"""
Resilient form-field locator.
Lightweight package init; import submodules directly, e.g.:
  from resilient_locator.selectors import ResilientLocator, ElementNotFound
  from resilient_locator.core.engine import Engine
"""

__version__ = "0.1.0"

__all__: list[str] = []
