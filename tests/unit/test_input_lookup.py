import logging

import pytest

from resilient_locator.selectors import ElementNotFound, StaticHtmlSurface


def test_first_name_round_trip(locator, form_surface):
    first_name = locator.find_input_by_label("First Name", placeholder="First Name", name="firstname")

    form_surface.fill(first_name, "John")

    assert form_surface.input_value(first_name) == "John"
    assert form_surface.is_visible(first_name) is True
    assert form_surface.is_enabled(first_name) is True


def test_label_for_association_is_the_primary_strategy(locator):
    res = locator.resolve_input("Last Name", placeholder="Last Name", name="lastname", id="lname")
    assert res.strategy == "label"
    assert res.index == 0
    assert res.used_fallback is False
    assert res.handle.get("id") == "lname"


def test_label_beats_attribute_fallbacks_pointing_elsewhere(locator_for):
    html = """
    <form>
      <label for="nick">Nickname</label>
      <input id="nick" name="n1" type="text">
      <input id="decoy" name="nickname" placeholder="Nickname" type="text">
    </form>
    """
    locator, _ = locator_for(html)

    res = locator.resolve_input("Nickname", placeholder="Nickname", name="nickname", id="decoy")

    assert res.strategy == "label"
    assert res.handle.get("id") == "nick"


def test_label_text_is_matched_by_containment_after_normalizing(locator_for):
    html = '<label for="c">\n   City  of   birth *</label><input id="c" type="text">'
    locator, _ = locator_for(html)
    assert locator.find_input_by_label("City of birth").get("id") == "c"


def test_unassociated_label_prefers_subtree_then_following_sibling(locator_for):
    html = """
    <div>
      <label>Phone <input id="inner" type="text"></label>
      <input id="after" type="text">
    </div>
    <div><label>Fax</label><span>?</span><input id="fax" type="text"></div>
    <div><label>Pager <input id="pager" type="text"></label></div>
    """
    locator, _ = locator_for(html)

    assert locator.find_input_by_label("Phone").get("id") == "inner"
    assert locator.find_input_by_label("Fax").get("id") == "fax"
    assert locator.find_input_by_label("Pager").get("id") == "pager"


@pytest.mark.parametrize(
    "markup",
    [
        '<label for="fname">First Name</label><input id="fname" name="firstname" class="form-control">',
        '<label for="first-name-v2">First Name</label><input id="first-name-v2" name="fn" class="x-input">',
        '<label>First Name</label><input name="given" class="renamed">',
        '<label>First Name <input class="nested"></label>',
    ],
)
def test_markup_changes_behind_the_same_label_resolve_the_same_field(locator_for, markup):
    locator, surface = locator_for(f"<form>{markup}<label>Last Name</label><input id='last'></form>")

    res = locator.resolve_input("First Name", placeholder="First Name", name="firstname", id="fname")
    surface.fill(res.handle, "John")

    assert res.strategy == "label"
    assert res.handle.get("id") != "last"
    assert surface.input_value(res.handle) == "John"


def test_placeholder_fallback_when_no_label_matches(locator_for, caplog):
    html = '<input id="a" placeholder="Search"><input id="b" name="q">'
    locator, _ = locator_for(html)

    with caplog.at_level(logging.WARNING):
        res = locator.resolve_input("Search terms", placeholder="Search", name="q")

    assert res.strategy == "placeholder"
    assert res.handle.get("id") == "a"
    assert "fallback strategy 'placeholder'" in caplog.text


def test_name_then_id_fallbacks(locator_for):
    locator, _ = locator_for('<input id="x1" name="zip"><input id="postal">')

    assert locator.resolve_input("Zip", name="zip", id="postal").strategy == "name"
    by_id = locator.resolve_input("Zip", name="missing", id="postal")
    assert by_id.strategy == "id"
    assert by_id.handle.get("id") == "postal"


def test_dangling_for_attribute_falls_through_to_fallbacks(locator_for):
    html = '<label for="gone">Company</label><input id="co" name="company">'
    locator, _ = locator_for(html)

    res = locator.resolve_input("Company", name="company")

    assert res.strategy == "name"
    assert res.handle.get("id") == "co"


def test_exhaustion_raises_element_not_found_naming_the_label(locator):
    with pytest.raises(ElementNotFound) as exc:
        locator.find_input_by_label("Middle Name", placeholder="Middle", name="middlename", id="mname")

    assert exc.value.reason == "input with label 'Middle Name'"
    assert "Middle Name" in str(exc.value)
    assert not isinstance(exc.value, TimeoutError)
    assert exc.value.timeout_ms == 200


def test_blank_label_is_rejected(locator):
    with pytest.raises(ValueError):
        locator.find_input_by_label("   ")


def test_labels_with_quotes_are_looked_up_safely(locator_for):
    html = """
    <label for="o">Owner's "legal" name</label><input id="o">
    <label for="p">Pet's name</label><input id="p">
    """
    locator, _ = locator_for(html)

    assert locator.find_input_by_label("Owner's \"legal\" name").get("id") == "o"
    assert locator.find_input_by_label("Pet's name").get("id") == "p"


class _LateForm(StaticHtmlSurface):
    """Renders the real form only after a few queries, like a page still loading."""

    def __init__(self, final_html: str, after_queries: int) -> None:
        super().__init__("<div>loading...</div>")
        self._final_html = final_html
        self._left = after_queries

    def query(self, xpath, within=None):
        self._left -= 1
        if self._left == 0:
            self.set_content(self._final_html)
        return super().query(xpath, within)


def test_whole_cascade_is_retried_until_the_field_appears(practice_form_path):
    from resilient_locator.selectors import ResilientLocator

    surface = _LateForm(practice_form_path.read_text(encoding="utf-8"), after_queries=3)
    locator = ResilientLocator(surface, timeout_ms=2000, interval_ms=5)

    res = locator.resolve_input("First Name", placeholder="First Name")

    assert res.strategy == "label"
    assert res.ticks > 1
    assert res.handle.get("id") == "fname"
