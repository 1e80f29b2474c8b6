# resilient_locator/core/scenario_loader.py
from __future__ import annotations

"""Scenario schema and loader
-----------------------------
Pydantic models for form scenarios (steps that address fields by their
labels) and a YAML loader supporting multi-document files and ${ENV}
substitution.
"""

import os
import re
from enum import Enum
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from resilient_locator.selectors.requests import InputRequest


# ---------- Core enums ----------


class ActionName(str, Enum):
    goto = "goto"
    fill = "fill"
    select_radio = "select_radio"
    click_checkbox = "click_checkbox"
    wait_clickable = "wait_clickable"
    assert_value = "assert_value"
    assert_radio = "assert_radio"
    assert_checkbox = "assert_checkbox"
    assert_interactable = "assert_interactable"


# ---------- Field references ----------


def _non_empty(v: str, what: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{what} cannot be empty")
    return v


class FieldRef(BaseModel):
    """Text input addressed by label, with optional attribute fallbacks."""
    label: str
    placeholder: Optional[str] = None
    name: Optional[str] = None
    id: Optional[str] = None

    @field_validator("label")
    @classmethod
    def _label_non_empty(cls, v: str) -> str:
        return _non_empty(v, "field.label")

    def to_request(self) -> InputRequest:
        return InputRequest(self.label, placeholder=self.placeholder, name=self.name, id=self.id)


class RadioRef(BaseModel):
    group: str = ""
    option: str

    @field_validator("option")
    @classmethod
    def _option_non_empty(cls, v: str) -> str:
        return _non_empty(v, "radio.option")


# ---------- Step models (union keyed by 'action') ----------


class StepBase(BaseModel):
    action: ActionName
    name: Optional[str] = Field(default=None, description="Human-friendly step label")


class StepGoto(StepBase):
    action: Literal[ActionName.goto]
    url: str = Field(..., description="Absolute http(s) or file URL")

    @field_validator("url")
    @classmethod
    def _url_scheme(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://", "file://")):
            raise ValueError("goto.url must be an absolute http(s) or file:// URL")
        return v


class StepFill(StepBase):
    action: Literal[ActionName.fill]
    field: FieldRef
    text: str = Field(..., description="Text to enter (replaces existing)")


class StepSelectRadio(StepBase):
    action: Literal[ActionName.select_radio]
    group: str = ""
    option: str

    @field_validator("option")
    @classmethod
    def _option_non_empty(cls, v: str) -> str:
        return _non_empty(v, "select_radio.option")


class StepClickCheckbox(StepBase):
    action: Literal[ActionName.click_checkbox]
    label: str

    @field_validator("label")
    @classmethod
    def _label_non_empty(cls, v: str) -> str:
        return _non_empty(v, "click_checkbox.label")


class StepWaitClickable(StepBase):
    """Exactly one of field / radio / checkbox."""
    action: Literal[ActionName.wait_clickable]
    field: Optional[FieldRef] = None
    radio: Optional[RadioRef] = None
    checkbox: Optional[str] = None

    @model_validator(mode="after")
    def _one_target(self) -> "StepWaitClickable":
        given = [t for t in (self.field, self.radio, self.checkbox) if t is not None]
        if len(given) != 1:
            raise ValueError("wait_clickable needs exactly one of field, radio, checkbox")
        return self


class StepAssertValue(StepBase):
    action: Literal[ActionName.assert_value]
    field: FieldRef
    expect: str


class StepAssertRadio(StepBase):
    action: Literal[ActionName.assert_radio]
    group: str = ""
    option: str
    selected: bool = True


class StepAssertCheckbox(StepBase):
    action: Literal[ActionName.assert_checkbox]
    label: str
    selected: bool = True


class StepAssertInteractable(StepBase):
    action: Literal[ActionName.assert_interactable]
    field: FieldRef


Step = Union[
    StepGoto,
    StepFill,
    StepSelectRadio,
    StepClickCheckbox,
    StepWaitClickable,
    StepAssertValue,
    StepAssertRadio,
    StepAssertCheckbox,
    StepAssertInteractable,
]


# ---------- Scenario model ----------


class Scenario(BaseModel):
    version: str = Field(default="1")
    name: str = Field(..., description="Scenario name, e.g. 'first_name_field'")
    url: Optional[str] = Field(default=None, description="Page opened before the first step")
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    timeout_ms: Optional[int] = Field(default=None, ge=0, description="Overrides LOCATOR_TIMEOUT_MS")

    steps: list[Step]

    @field_validator("name")
    @classmethod
    def _name_non_empty(cls, v: str) -> str:
        return _non_empty(v, "name")

    @field_validator("steps")
    @classmethod
    def _has_steps(cls, v: list) -> list:
        if not v:
            raise ValueError("a scenario needs at least one step")
        return v


# ---------- Helpers ----------


_ENV_REF = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def _subst_env(obj: Any) -> Any:
    """Replace ${VAR} in every string; unknown variables are left as-is."""
    if isinstance(obj, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), m.group(0)), obj)
    if isinstance(obj, list):
        return [_subst_env(x) for x in obj]
    if isinstance(obj, dict):
        return {k: _subst_env(v) for k, v in obj.items()}
    return obj


def _format_validation_error(ve: ValidationError, header: str) -> str:
    lines = [header]
    for e in ve.errors():
        loc = ".".join(str(p) for p in e.get("loc", []))
        msg = e.get("msg", "invalid value")
        lines.append(f"  - {loc}: {msg}")
    return "\n".join(lines)


def find_scenario_files(root: Path, recursive: bool = True) -> list[Path]:
    if recursive:
        return sorted(list(root.rglob("*.yaml")) + list(root.rglob("*.yml")))
    return sorted(list(root.glob("*.yaml")) + list(root.glob("*.yml")))


# ---------- Public API ----------


def load_scenarios_file(path: Path | str) -> list[Scenario]:
    """Load one or more scenarios from a YAML file (supports multi-document)."""
    sc_path = Path(path)
    if not sc_path.exists():
        raise FileNotFoundError(f"Scenario file not found: {sc_path}")
    try:
        docs = list(yaml.safe_load_all(sc_path.read_text(encoding="utf-8")))
    except yaml.YAMLError as ye:
        raise ValueError(f"YAML parse error in {sc_path}: {ye}") from ye

    out: list[Scenario] = []
    for idx, data in enumerate(docs, start=1):
        if data is None:
            continue
        if not isinstance(data, dict):
            raise ValueError(f"Document {idx} in {sc_path} must be a mapping/object.")
        data.setdefault("name", sc_path.stem if len(docs) == 1 else f"{sc_path.stem}_{idx}")
        try:
            out.append(Scenario.model_validate(_subst_env(data)))
        except ValidationError as ve:
            raise ValueError(
                _format_validation_error(ve, f"Invalid scenario '{sc_path}' (document {idx}):")
            ) from ve
    if not out:
        raise ValueError(f"No scenario documents found in {sc_path}")
    return out


def load_scenario(path: Path | str) -> Scenario:
    """Load a single-scenario file; multi-document files must use load_scenarios_file."""
    scenarios = load_scenarios_file(path)
    if len(scenarios) != 1:
        raise ValueError(f"{path} holds {len(scenarios)} scenarios; use load_scenarios_file()")
    return scenarios[0]


class ScenarioLoader:
    def load_directory(
        self,
        root: Path,
        *,
        recursive: bool = True,
        tag: Optional[str] = None,
    ) -> list[tuple[Path, Scenario]]:
        """Every valid scenario under `root`; invalid files are skipped (use `validate`)."""
        found: list[tuple[Path, Scenario]] = []
        for fp in find_scenario_files(root, recursive=recursive):
            try:
                scenarios = load_scenarios_file(fp)
            except (ValueError, OSError):
                continue
            for sc in scenarios:
                if tag and tag not in sc.tags:
                    continue
                found.append((fp, sc))
        return found


__all__ = [
    "ActionName",
    "FieldRef",
    "RadioRef",
    "Scenario",
    "Step",
    "find_scenario_files",
    "load_scenario",
    "load_scenarios_file",
    "ScenarioLoader",
]
