from pathlib import Path
import textwrap

import pytest

from resilient_locator.core.scenario_loader import (
    ActionName,
    ScenarioLoader,
    load_scenario,
    load_scenarios_file,
)

BUNDLED = Path(__file__).resolve().parents[2] / "scenarios" / "cloudqa_practice_form.yaml"


def _write(tmp_path: Path, name: str, body: str) -> Path:
    p = tmp_path / name
    p.write_text(textwrap.dedent(body), encoding="utf-8")
    return p


def test_bundled_cloudqa_scenarios_load():
    scenarios = load_scenarios_file(BUNDLED)

    assert [s.name for s in scenarios] == ["first_name_field", "gender_selection", "hobbies_selection"]
    assert scenarios[0].steps[0].action == ActionName.fill
    assert scenarios[0].steps[0].field.to_request().describe() == "input with label 'First Name'"
    assert scenarios[1].tags == ["radio"]
    assert scenarios[2].steps[-2].selected is False


def test_multi_doc_names_default_to_stem_and_index(tmp_path: Path):
    p = _write(
        tmp_path,
        "signup.yaml",
        """
        steps:
          - action: click_checkbox
            label: Terms
        ---
        steps:
          - action: select_radio
            option: "Yes"
        """,
    )

    scenarios = load_scenarios_file(p)

    assert [s.name for s in scenarios] == ["signup_1", "signup_2"]
    assert scenarios[1].steps[0].group == ""


def test_single_doc_name_defaults_to_stem(tmp_path: Path):
    p = _write(
        tmp_path,
        "login.yml",
        """
        steps:
          - action: assert_interactable
            field: {label: "User name"}
        """,
    )
    assert load_scenario(p).name == "login"


def test_env_references_are_substituted(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("FORM_PAGE", "file:///tmp/form.html")
    p = _write(
        tmp_path,
        "env.yaml",
        """
        name: env
        url: "${FORM_PAGE}"
        steps:
          - action: goto
            url: "${FORM_PAGE}"
        """,
    )

    sc = load_scenario(p)

    assert sc.url == "file:///tmp/form.html"
    assert sc.steps[0].url == "file:///tmp/form.html"


@pytest.mark.parametrize(
    "steps, fragment",
    [
        ('  - action: goto\n    url: "ftp://example.com"\n', "goto.url"),
        ("  - action: teleport\n", "steps"),
        ('  - action: fill\n    field: {label: "  "}\n    text: x\n', "steps"),
        ("  - action: wait_clickable\n    checkbox: A\n    field: {label: B}\n", "exactly one"),
        ("  - action: wait_clickable\n", "exactly one"),
    ],
)
def test_invalid_steps_are_reported(tmp_path: Path, steps, fragment):
    p = tmp_path / "bad.yaml"
    p.write_text("name: bad\nsteps:\n" + steps, encoding="utf-8")

    with pytest.raises(ValueError) as exc:
        load_scenarios_file(p)

    assert "Invalid scenario" in str(exc.value)
    assert fragment in str(exc.value)


def test_scenario_without_steps_is_invalid(tmp_path: Path):
    p = _write(tmp_path, "empty.yaml", "name: empty\nsteps: []\n")
    with pytest.raises(ValueError):
        load_scenarios_file(p)


def test_yaml_errors_and_missing_files(tmp_path: Path):
    broken = _write(tmp_path, "broken.yaml", "name: [unclosed\n")
    with pytest.raises(ValueError, match="YAML parse error"):
        load_scenarios_file(broken)
    with pytest.raises(FileNotFoundError):
        load_scenarios_file(tmp_path / "missing.yaml")


def test_load_scenario_rejects_multi_doc_files():
    with pytest.raises(ValueError, match="load_scenarios_file"):
        load_scenario(BUNDLED)


def test_directory_listing_filters_by_tag_and_skips_invalid(tmp_path: Path):
    _write(
        tmp_path,
        "a.yaml",
        """
        name: a
        tags: [radio]
        steps:
          - action: select_radio
            option: Male
        """,
    )
    nested = tmp_path / "nested"
    nested.mkdir()
    _write(
        nested,
        "b.yml",
        """
        name: b
        tags: [checkbox]
        steps:
          - action: click_checkbox
            label: Reading
        """,
    )
    _write(tmp_path, "broken.yaml", "steps: 3\n")

    loader = ScenarioLoader()

    assert [sc.name for _, sc in loader.load_directory(tmp_path)] == ["a", "b"]
    assert [sc.name for _, sc in loader.load_directory(tmp_path, recursive=False)] == ["a"]
    assert [sc.name for _, sc in loader.load_directory(tmp_path, tag="checkbox")] == ["b"]
