import pytest

from resilient_locator.selectors import ElementNotFound


def _click(locator, surface, label):
    surface.click(locator.wait_for_clickable(locator.find_checkbox_by_label(label)))


def test_hobbies_toggle_independently(locator, form_surface):
    _click(locator, form_surface, "Reading")
    _click(locator, form_surface, "Cricket")

    reading = locator.find_checkbox_by_label("Reading")
    cricket = locator.find_checkbox_by_label("Cricket")
    assert form_surface.is_checked(reading) is True
    assert form_surface.is_checked(cricket) is True

    _click(locator, form_surface, "Reading")

    assert form_surface.is_checked(locator.find_checkbox_by_label("Reading")) is False
    assert form_surface.is_checked(locator.find_checkbox_by_label("Cricket")) is True
    assert form_surface.is_checked(locator.find_checkbox_by_label("Dance")) is False


def test_label_for_association(locator):
    res = locator.resolve_checkbox("Cricket")

    assert res.strategy == "label"
    assert res.handle.get("id") == "Cricket"


def test_preceding_checkbox_is_preferred_over_following(locator_for):
    html = '<div><input type="checkbox" id="before"><label>Subscribe</label><input type="checkbox" id="after"></div>'
    locator, _ = locator_for(html)
    assert locator.find_checkbox_by_label("Subscribe").get("id") == "before"


def test_following_checkbox_skips_other_input_types(locator_for):
    html = '<div><input type="text" id="txt"><label>Agree</label><input type="checkbox" id="agree"></div>'
    locator, _ = locator_for(html)
    assert locator.find_checkbox_by_label("Agree").get("id") == "agree"


def test_checkbox_nested_in_label(locator_for):
    locator, _ = locator_for('<label>Remember me <input type="checkbox" id="rem"></label>')
    assert locator.find_checkbox_by_label("Remember me").get("id") == "rem"


def test_label_for_a_text_input_falls_back_to_value(locator_for):
    html = """
    <label for="n">Newsletter</label><input id="n" type="text">
    <input type="checkbox" id="cb" value="Newsletter">
    """
    locator, _ = locator_for(html)

    res = locator.resolve_checkbox("Newsletter")

    assert res.strategy == "value"
    assert res.handle.get("id") == "cb"


def test_missing_checkbox_raises_with_its_label(locator):
    with pytest.raises(ElementNotFound) as exc:
        locator.find_checkbox_by_label("Swimming")

    assert exc.value.reason == "checkbox with label 'Swimming'"
