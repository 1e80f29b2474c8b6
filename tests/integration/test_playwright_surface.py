"""Same checks as the unit suite, against a real Chromium page.

Run with: pytest -m browser (needs `playwright install chromium`).
"""
import pytest

from resilient_locator.selectors import ElementNotFound, NotInteractable, PlaywrightSurface, ResilientLocator

pytestmark = pytest.mark.browser


@pytest.fixture(scope="module")
def browser():
    sync_api = pytest.importorskip("playwright.sync_api")
    with sync_api.sync_playwright() as p:
        try:
            b = p.chromium.launch(headless=True)
        except Exception as e:
            pytest.skip(f"chromium not available: {e}")
        yield b
        b.close()


@pytest.fixture
def page(browser, practice_form_path):
    context = browser.new_context()
    pg = context.new_page()
    pg.set_content(practice_form_path.read_text(encoding="utf-8"))
    yield pg
    context.close()


@pytest.fixture
def live_locator(page):
    return ResilientLocator(PlaywrightSurface(page), timeout_ms=1000, interval_ms=50)


def test_first_name_round_trip(live_locator):
    surface = live_locator.surface
    first_name = live_locator.wait_for_clickable(
        live_locator.find_input_by_label("First Name", placeholder="First Name", name="firstname")
    )

    surface.fill(first_name, "John")

    assert surface.input_value(first_name) == "John"
    assert surface.get_attribute(first_name, "id") == "fname"


def test_gender_is_mutually_exclusive(live_locator):
    surface = live_locator.surface
    male = live_locator.wait_for_clickable(live_locator.find_radio_by_label_and_value("Gender", "Male"))
    surface.click(male)
    female = live_locator.wait_for_clickable(live_locator.find_radio_by_label_and_value("Gender", "Female"))
    surface.click(female)

    assert surface.is_checked(female) is True
    assert surface.is_checked(male) is False


def test_hobbies_toggle_independently(live_locator):
    surface = live_locator.surface
    for label in ("Reading", "Cricket", "Reading"):
        surface.click(live_locator.wait_for_clickable(live_locator.find_checkbox_by_label(label)))

    assert surface.is_checked(live_locator.find_checkbox_by_label("Reading")) is False
    assert surface.is_checked(live_locator.find_checkbox_by_label("Cricket")) is True


def test_text_proximity_in_the_browser(page, live_locator):
    page.set_content('<div><input type="radio" id="g-1" name="s"> Male <input type="radio" id="g-2" name="s"> Female</div>')

    res = live_locator.resolve_radio("Gender", "Female")

    assert res.strategy == "text-proximity"
    assert live_locator.surface.get_attribute(res.handle, "id") == "g-2"


def test_typed_errors(live_locator):
    with pytest.raises(ElementNotFound):
        live_locator.find_input_by_label("Middle Name")
    with pytest.raises(NotInteractable):
        live_locator.wait_for_clickable(live_locator.find_input_by_label("Email"))
