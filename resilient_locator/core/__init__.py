"""
Core package: scenario schema, step dispatch and the browser engine.
Lightweight package init to avoid import cycles.

Consumers should import submodules directly, e.g.:
  from resilient_locator.core.scenario_loader import load_scenarios_file, Scenario
  from resilient_locator.core.actions import execute_step
  from resilient_locator.core.engine import run_scenario, Engine
"""

__all__: list[str] = []
