from pathlib import Path

import pytest

from resilient_locator.selectors import ResilientLocator, StaticHtmlSurface


FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def practice_form_path() -> Path:
    return FIXTURES / "practice_form.html"


@pytest.fixture
def form_surface(practice_form_path: Path) -> StaticHtmlSurface:
    return StaticHtmlSurface.from_file(practice_form_path)


@pytest.fixture
def locator(form_surface: StaticHtmlSurface) -> ResilientLocator:
    return ResilientLocator(form_surface, timeout_ms=200, interval_ms=10)


@pytest.fixture
def locator_for():
    """Build a short-deadline locator over an HTML snippet."""
    def _make(html: str, timeout_ms: int = 150):
        surface = StaticHtmlSurface(html)
        return ResilientLocator(surface, timeout_ms=timeout_ms, interval_ms=10), surface
    return _make
