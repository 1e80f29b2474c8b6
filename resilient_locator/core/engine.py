from __future__ import annotations

"""Scenario engine
------------------
Opens a Playwright browser session per scenario, runs its steps through the
resilient locator, and always tears the session down. `run_on_surface` runs
the same steps against any DomSurface (e.g. a saved page).
"""

from pathlib import Path
from typing import Any, Dict, Optional

from playwright.sync_api import sync_playwright

from resilient_locator.core import actions
from resilient_locator.core.scenario_loader import Scenario, load_scenario
from resilient_locator.selectors.locator import ResilientLocator
from resilient_locator.selectors.surface import DomSurface, PlaywrightSurface
from resilient_locator.utils.config import Settings, get_settings
from resilient_locator.utils.logger import get_logger, log_with_context
from resilient_locator.utils.timing import Stopwatch, WaitPolicy


class Engine:
    """Runs scenarios against a live browser page (or a given surface)."""

    def __init__(self, settings: Optional[Settings] = None, headless: Optional[bool] = None):
        self.settings = settings or get_settings()
        self.headless = headless
        self.log = get_logger(__name__)

    def _locator_for(self, scenario: Scenario, surface: DomSurface) -> ResilientLocator:
        policy = WaitPolicy.from_settings(self.settings)
        return ResilientLocator(surface, scenario.timeout_ms, policy=policy)

    def run_on_surface(
        self,
        scenario: Scenario,
        surface: DomSurface,
        start_url: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Execute all steps of a scenario and return a small result dict.

        The page is opened at `scenario.url`, else `start_url`, else left as is.

        Returns {"ok": bool, "scenario": str, "steps_run": int, "elapsed_ms": int}
        plus "error", "error_type" and "failed_step" when a step fails.
        """
        locator = self._locator_for(scenario, surface)
        scenario_log = log_with_context(self.log, scenario=scenario.name)
        scenario_log.info(f"Starting scenario: {scenario.name} (steps={len(scenario.steps)})")

        steps_run = 0
        with Stopwatch() as sw:
            url = scenario.url or start_url
            if url:
                try:
                    surface.goto(url)
                except Exception as e:
                    scenario_log.exception(f"Could not open {url}:")
                    return self._failure(scenario, e, steps_run, sw.elapsed_ms(), {"index": 0, "action": "goto", "name": url})

            for idx, step in enumerate(scenario.steps, start=1):
                step_log = log_with_context(scenario_log, step_index=idx, action=step.action.value)
                step_log.info(f"Step {idx}/{len(scenario.steps)}: {step.name or step.action.value}")
                try:
                    actions.execute_step(locator, step)
                except Exception as e:
                    step_log.exception("Scenario step failed:")
                    failed = {"index": idx, "action": step.action.value, "name": step.name}
                    return self._failure(scenario, e, steps_run, sw.elapsed_ms(), failed)
                steps_run += 1

        scenario_log.info(f"Scenario passed: {scenario.name} in {sw.elapsed_ms()} ms")
        return {"ok": True, "scenario": scenario.name, "steps_run": steps_run, "elapsed_ms": sw.elapsed_ms()}

    def run_scenario(self, scenario: Scenario) -> Dict[str, Any]:
        """Open a browser session, run the scenario in it, close the session."""
        s = self.settings
        try:
            with sync_playwright() as p:
                browser_type = getattr(p, s.BROWSER_TYPE.value)
                browser = browser_type.launch(**s.playwright_launch_kwargs(headless=self.headless))
                try:
                    context = browser.new_context(**s.playwright_context_kwargs())
                    page = context.new_page()
                    surface = PlaywrightSurface(page, navigation_timeout_ms=s.PAGE_LOAD_TIMEOUT)
                    return self.run_on_surface(scenario, surface, start_url=s.BASE_URL)
                finally:
                    browser.close()
        except Exception as e:
            # browser could not start or died outside a step
            self.log.exception("Browser session failed:")
            return self._failure(scenario, e, 0, 0, None)

    @staticmethod
    def _failure(
        scenario: Scenario,
        err: BaseException,
        steps_run: int,
        elapsed_ms: int,
        failed_step: Optional[Dict[str, Any]],
    ) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "ok": False,
            "scenario": scenario.name,
            "steps_run": steps_run,
            "elapsed_ms": elapsed_ms,
            "error": str(err),
            "error_type": err.__class__.__name__,
        }
        if failed_step:
            result["failed_step"] = failed_step
        return result


def run_scenario(scenario: Path | str | Scenario) -> Dict[str, Any]:
    sc = load_scenario(scenario) if isinstance(scenario, (str, Path)) else scenario
    return Engine(settings=get_settings()).run_scenario(sc)
