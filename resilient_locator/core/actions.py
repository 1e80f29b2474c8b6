# resilient_locator/core/actions.py
from __future__ import annotations

"""Scenario actions dispatcher
------------------------------
Maps validated scenario steps to locator lookups and surface interactions.
Lookups already poll until their deadline, so steps are not retried here.
"""

from typing import Any

from resilient_locator.core.scenario_loader import (
    ActionName,
    FieldRef,
    StepAssertCheckbox,
    StepAssertInteractable,
    StepAssertRadio,
    StepAssertValue,
    StepClickCheckbox,
    StepFill,
    StepGoto,
    StepSelectRadio,
    StepWaitClickable,
)
from resilient_locator.selectors.locator import ResilientLocator
from resilient_locator.utils.timing import measure

__all__ = ["execute_step"]


def _find_field(locator: ResilientLocator, field: FieldRef) -> Any:
    return locator.find_input_by_label(field.label, placeholder=field.placeholder, name=field.name, id=field.id)


# ------------- Step executors -------------

@measure("goto")
def _do_goto(locator: ResilientLocator, step: StepGoto) -> None:
    locator.surface.goto(step.url)


@measure("fill")
def _do_fill(locator: ResilientLocator, step: StepFill) -> None:
    handle = locator.wait_for_clickable(_find_field(locator, step.field))
    locator.surface.fill(handle, step.text)


@measure("select_radio")
def _do_select_radio(locator: ResilientLocator, step: StepSelectRadio) -> None:
    handle = locator.find_radio_by_label_and_value(step.group, step.option)
    locator.surface.click(locator.wait_for_clickable(handle))


@measure("click_checkbox")
def _do_click_checkbox(locator: ResilientLocator, step: StepClickCheckbox) -> None:
    handle = locator.find_checkbox_by_label(step.label)
    locator.surface.click(locator.wait_for_clickable(handle))


@measure("wait_clickable")
def _do_wait_clickable(locator: ResilientLocator, step: StepWaitClickable) -> None:
    if step.field is not None:
        handle = _find_field(locator, step.field)
    elif step.radio is not None:
        handle = locator.find_radio_by_label_and_value(step.radio.group, step.radio.option)
    else:
        handle = locator.find_checkbox_by_label(step.checkbox)
    locator.wait_for_clickable(handle)


@measure("assert_value")
def _do_assert_value(locator: ResilientLocator, step: StepAssertValue) -> None:
    actual = locator.surface.input_value(_find_field(locator, step.field))
    if actual != step.expect:
        raise AssertionError(f"assert_value failed: '{step.field.label}' holds {actual!r}, expected {step.expect!r}")


@measure("assert_radio")
def _do_assert_radio(locator: ResilientLocator, step: StepAssertRadio) -> None:
    handle = locator.find_radio_by_label_and_value(step.group, step.option)
    checked = locator.surface.is_checked(handle)
    if checked != step.selected:
        state = "selected" if step.selected else "not selected"
        raise AssertionError(f"assert_radio failed: '{step.option}' should be {state}")


@measure("assert_checkbox")
def _do_assert_checkbox(locator: ResilientLocator, step: StepAssertCheckbox) -> None:
    handle = locator.find_checkbox_by_label(step.label)
    checked = locator.surface.is_checked(handle)
    if checked != step.selected:
        state = "selected" if step.selected else "not selected"
        raise AssertionError(f"assert_checkbox failed: '{step.label}' should be {state}")


@measure("assert_interactable")
def _do_assert_interactable(locator: ResilientLocator, step: StepAssertInteractable) -> None:
    handle = _find_field(locator, step.field)
    surface = locator.surface
    if not surface.is_visible(handle):
        raise AssertionError(f"assert_interactable failed: '{step.field.label}' is not visible")
    if not surface.is_enabled(handle):
        raise AssertionError(f"assert_interactable failed: '{step.field.label}' is not enabled")


# ------------- Dispatcher -------------

_EXECUTORS = {
    ActionName.goto: _do_goto,
    ActionName.fill: _do_fill,
    ActionName.select_radio: _do_select_radio,
    ActionName.click_checkbox: _do_click_checkbox,
    ActionName.wait_clickable: _do_wait_clickable,
    ActionName.assert_value: _do_assert_value,
    ActionName.assert_radio: _do_assert_radio,
    ActionName.assert_checkbox: _do_assert_checkbox,
    ActionName.assert_interactable: _do_assert_interactable,
}


def execute_step(locator: ResilientLocator, step: Any) -> None:
    """
    Execute one validated step against the locator's surface.

    Raises ElementNotFound / NotInteractable from lookups and
    AssertionError from assert_* steps.
    """
    executor = _EXECUTORS.get(step.action)
    if executor is None:
        raise NotImplementedError(f"Unsupported action: {step.action}")
    executor(locator, step)
