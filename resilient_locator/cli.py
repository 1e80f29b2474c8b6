# resilient_locator/cli.py
from __future__ import annotations

"""Command-line interface
------------------------
List/validate/run form scenarios, print the effective config, and probe a
saved HTML page with a single lookup to see which strategy resolves it.
"""

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import click

from resilient_locator import __version__
from resilient_locator.utils.config import get_settings
from resilient_locator.utils.logger import get_logger, bind, unbind, set_log_level
from resilient_locator.core.scenario_loader import (
    Scenario,
    ScenarioLoader,
    find_scenario_files,
    load_scenarios_file,
)


# -------- helpers --------


def _echo_json(obj) -> None:
    click.echo(json.dumps(obj, indent=2, ensure_ascii=False))


def _collect_files(targets: List[str], scenarios_dir: Optional[str], recursive: bool) -> List[Path]:
    paths: List[Path] = []
    if targets:
        for p in (Path(t).resolve() for t in targets):
            if p.is_dir():
                paths.extend(find_scenario_files(p, recursive=True))
            else:
                paths.append(p)
    elif scenarios_dir:
        paths.extend(find_scenario_files(Path(scenarios_dir), recursive=recursive))
    return paths


# -------- CLI root --------


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Override LOG_LEVEL from settings",
)
@click.version_option(version=__version__, prog_name="resilient-locator")
def cli(log_level: Optional[str]):
    _ = get_settings()
    if log_level:
        set_log_level(log_level.upper())


# -------- commands --------


@cli.command("config")
def cmd_config():
    """Print effective configuration (after .env & env vars)."""
    s = get_settings()
    _echo_json(s.model_dump(mode="json"))


@cli.command("list")
@click.option(
    "--dir", "scenarios_dir",
    type=click.Path(file_okay=False, dir_okay=True, exists=True),
    default=lambda: str(get_settings().SCENARIOS_DIR),
    show_default="SCENARIOS_DIR",
    help="Directory containing scenario YAML files",
)
@click.option("--recursive/--no-recursive", default=True, show_default=True)
@click.option("--tag", type=str, default=None, help="Only scenarios carrying this tag")
def cmd_list(scenarios_dir: str, recursive: bool, tag: Optional[str]):
    """List scenarios available in a directory."""
    rows = ScenarioLoader().load_directory(Path(scenarios_dir), recursive=recursive, tag=tag)
    if not rows:
        click.echo("No scenarios found.")
        return

    click.echo(f"Found {len(rows)} scenario(s):\n")
    for fp, sc in rows:
        tags = f" [{', '.join(sc.tags)}]" if sc.tags else ""
        click.echo(f" - {sc.name}{tags}  ({len(sc.steps)} steps)  <- {fp}")


@cli.command("validate")
@click.argument("targets", nargs=-1, required=False)
@click.option("--dir", "scenarios_dir", type=click.Path(file_okay=False, dir_okay=True, exists=True),
              help="Validate all scenarios under this directory")
@click.option("--recursive/--no-recursive", default=True, show_default=True)
def cmd_validate(targets: List[str], scenarios_dir: Optional[str], recursive: bool):
    """Validate scenario files or a directory (supports multi-doc YAML)."""
    if not targets and not scenarios_dir:
        click.echo("Provide file(s) or --dir to validate.")
        sys.exit(2)

    ok = True
    for fp in _collect_files(list(targets), scenarios_dir, recursive):
        try:
            for sc in load_scenarios_file(fp):
                click.echo(f"OK  {fp}  ->  {sc.name} ({len(sc.steps)} steps)")
        except (ValueError, OSError) as e:
            ok = False
            click.echo(f"ERR {fp}  ->  {e}")

    sys.exit(0 if ok else 1)


@cli.command("run")
@click.argument("targets", nargs=-1, required=False)
@click.option("--dir", "scenarios_dir", type=click.Path(file_okay=False, dir_okay=True, exists=True),
              help="Run all scenarios found under this directory")
@click.option("--recursive/--no-recursive", default=True, show_default=True)
@click.option("--tag", type=str, default=None, help="Only scenarios carrying this tag")
@click.option("--headless/--headed", default=None, help="Override HEADLESS from settings")
@click.option("--json-out", type=click.Path(dir_okay=False), default=None, help="Write a JSON summary to this file")
def cmd_run(
    targets: List[str],
    scenarios_dir: Optional[str],
    recursive: bool,
    tag: Optional[str],
    headless: Optional[bool],
    json_out: Optional[str],
):
    """
    Run scenarios one after another, each in a fresh browser session.

    Examples:
      resilient-locator run scenarios/cloudqa_practice_form.yaml
      resilient-locator run --dir scenarios --tag checkbox --headed
    """
    settings = get_settings()
    if not targets and not scenarios_dir:
        click.echo("Nothing to run. Provide file(s) or --dir.")
        sys.exit(2)

    scenarios: List[Scenario] = []
    for fp in _collect_files(list(targets), scenarios_dir, recursive):
        try:
            scenarios.extend(sc for sc in load_scenarios_file(fp) if not tag or tag in sc.tags)
        except (ValueError, OSError) as e:
            click.echo(f"ERR {fp}  ->  {e}")
            sys.exit(1)

    if not scenarios:
        click.echo("No scenarios matched.")
        sys.exit(1)

    bind(run_id=datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ"))
    click.echo(f"Running {len(scenarios)} scenario(s)...")

    from resilient_locator.core.engine import Engine

    engine = Engine(settings=settings, headless=headless)
    results = [engine.run_scenario(sc) for sc in scenarios]

    for res in results:
        if res.get("ok"):
            click.echo(f"OK  {res['scenario']} ({res['steps_run']} steps, {res['elapsed_ms']} ms)")
        else:
            failed = res.get("failed_step") or {}
            step_desc = ""
            if failed:
                step_desc = f" [step {failed.get('index', '?')} {failed.get('action', '')} {failed.get('name') or ''}]"
            click.echo(f"ERR {res['scenario']}{step_desc} -> {res.get('error_type')}: {res.get('error')}")

    ok_count = sum(1 for r in results if r.get("ok"))
    fail_count = len(results) - ok_count
    click.echo(f"Done. OK={ok_count}  FAIL={fail_count}")

    if json_out:
        outp = Path(json_out).resolve()
        outp.parent.mkdir(parents=True, exist_ok=True)
        outp.write_text(json.dumps({"results": results}, indent=2), encoding="utf-8")
        click.echo(f"Wrote summary: {outp}")

    unbind("run_id")
    sys.exit(0 if fail_count == 0 else 1)


@cli.command("probe")
@click.argument("html_file", type=click.Path(dir_okay=False, exists=True))
@click.option("--input", "input_label", type=str, default=None, help="Label text of a text input")
@click.option("--placeholder", type=str, default=None, help="Placeholder fallback (with --input)")
@click.option("--name", type=str, default=None, help="Name attribute fallback (with --input)")
@click.option("--id", "element_id", type=str, default=None, help="Id fallback (with --input)")
@click.option("--radio", "radio_option", type=str, default=None, help="Visible text of a radio option")
@click.option("--group", type=str, default="", help="Radio group label (messages only)")
@click.option("--checkbox", "checkbox_label", type=str, default=None, help="Label text of a checkbox")
@click.option("--timeout-ms", type=int, default=0, show_default=True, help="Wait policy deadline")
def cmd_probe(
    html_file: str,
    input_label: Optional[str],
    placeholder: Optional[str],
    name: Optional[str],
    element_id: Optional[str],
    radio_option: Optional[str],
    group: str,
    checkbox_label: Optional[str],
    timeout_ms: int,
):
    """Resolve one field in a saved HTML page and show which strategy found it."""
    from resilient_locator.selectors import ElementNotFound, ResilientLocator, StaticHtmlSurface

    chosen = [v for v in (input_label, radio_option, checkbox_label) if v]
    if len(chosen) != 1:
        click.echo("Give exactly one of --input, --radio, --checkbox.")
        sys.exit(2)

    surface = StaticHtmlSurface.from_file(html_file)
    locator = ResilientLocator(surface, timeout_ms, interval_ms=50)
    try:
        if input_label:
            res = locator.resolve_input(input_label, placeholder=placeholder, name=name, id=element_id)
        elif radio_option:
            res = locator.resolve_radio(group, radio_option)
        else:
            res = locator.resolve_checkbox(checkbox_label)
    except ElementNotFound as e:
        get_logger(__name__).debug(f"probe failed: {e}")
        click.echo(f"NOT FOUND: {e.reason}")
        sys.exit(1)

    _echo_json({
        "request": res.request.describe(),
        "strategy": res.strategy,
        "fallback": res.used_fallback,
        "element": surface.describe(res.handle),
        "visible": surface.is_visible(res.handle),
        "enabled": surface.is_enabled(res.handle),
    })


def main() -> None:
    cli(prog_name="resilient-locator")


if __name__ == "__main__":
    main()
