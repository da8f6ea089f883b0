#!/usr/bin/env python3

"""Command line entry point: `migro scan`, `migro apply`, or `migro` for a menu."""

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.markup import escape
from rich.prompt import Prompt

from migro import __version__
from migro.config import load_config
from migro.engine.policy import EngineConfig, Mode, RunContext
from migro.exceptions import ConfigError
from migro.run.apply import ApplyConfig, run_apply
from migro.run.scan import ScanConfig, run_scan
from migro.utils.log import console, logger, remove_file_handler, start_run_log
from migro.utils.serialize import UNSET

_HELP_TEXT = """Scan C# controllers for routable actions, or update their [Authorize] attributes from a CSV.

[not dim]
Modes for [bold green]apply[/bold green]:
  Default (interactive): asks before replacing an existing attribute. Press Enter or type 'n' to skip, 'y' to proceed.
  [bold]--overwrite[/bold]: replaces existing attributes without asking.
  [bold]--preview[/bold]: shows what would change without touching any file.
[/not dim]
"""

_CONFIG_SPEC_HELP_TEXT = """Path to config files, names of builtin configs, or key-value pairs.

Multiple configs are recursively merged on top of the builtin default.

Examples:

[bold green]-c engine.blank_lines=terminate[/bold green]

[bold green]-c ./migro.yaml -c apply.confirm_inserts=true[/bold green]
"""

app = typer.Typer(rich_markup_mode="rich", add_completion=False, help=_HELP_TEXT)


def prompt_user(message: str) -> bool:
    """Ask for confirmation on the terminal. Only `y` or `yes` counts as yes."""
    try:
        answer = console.input(message)
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def _build_config(config_spec: list[str] | None, **overrides) -> dict:
    try:
        return load_config(config_spec, overrides)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(2)


def _validated(config_class, data: dict):
    try:
        return config_class(**data)
    except ValidationError as e:
        console.print(f"[red]Invalid {config_class.__name__}:[/red]\n{escape(str(e))}")
        raise typer.Exit(2)


def _run_with_log(log_dir: str, func, *args) -> int:
    handler, log_path = start_run_log(log_dir)
    try:
        return func(*args)
    finally:
        if handler is not None:
            logger.info(f"📝 Detailed log saved to: {log_path}")
            remove_file_handler(handler)


def apply_mappings(
    mappings: Path,
    root: Path,
    *,
    mode: Mode | None = None,
    confirm_inserts: bool | None = None,
    config_spec: list[str] | None = None,
    log_dir: str | None = None,
) -> int:
    config = _build_config(
        config_spec,
        apply={
            "mode": mode.value if mode else UNSET,
            "confirm_inserts": UNSET if confirm_inserts is None else confirm_inserts,
            "log_dir": log_dir or UNSET,
        },
    )
    apply_config = _validated(ApplyConfig, config.get("apply", {}))
    ctx = RunContext(
        mode=apply_config.mode,
        engine=_validated(EngineConfig, config.get("engine", {})),
        confirm_inserts=apply_config.confirm_inserts,
        confirm=prompt_user,
    )
    return _run_with_log(apply_config.log_dir, run_apply, mappings, root, ctx, apply_config)


def scan_controllers(
    root: Path,
    *,
    output: str | None = None,
    config_spec: list[str] | None = None,
    log_dir: str | None = None,
) -> int:
    config = _build_config(config_spec, scan={"output": output or UNSET, "log_dir": log_dir or UNSET})
    scan_config = _validated(ScanConfig, config.get("scan", {}))
    ctx = RunContext(engine=_validated(EngineConfig, config.get("engine", {})))
    return _run_with_log(scan_config.log_dir, run_scan, root, scan_config.output, ctx, scan_config)


MENU = {
    "1": "Scan controllers and write a mapping template",
    "2": "Apply mappings (interactive)",
    "3": "Apply mappings (overwrite)",
    "4": "Preview mappings",
    "5": "Exit",
}
MENU_MODES = {"2": Mode.INTERACTIVE, "3": Mode.OVERWRITE, "4": Mode.PREVIEW}


def run_menu() -> int:
    console.print(f"[bold]migro[/bold] {__version__} - C# Authorize Adapter\n")
    for key, label in MENU.items():
        console.print(f"  [bold cyan]{key}[/bold cyan]) {label}")
    choice = Prompt.ask("\nSelect an option", choices=list(MENU), default="5", console=console)
    if choice == "5":
        return 0
    root = Path(Prompt.ask("Controllers directory", console=console))
    if choice == "1":
        output = Prompt.ask("Output CSV", default="mappings_template.csv", console=console)
        return scan_controllers(root, output=output)
    mappings = Path(Prompt.ask("Mapping CSV", console=console))
    return apply_mappings(mappings, root, mode=MENU_MODES[choice])


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        raise typer.Exit(run_menu())


# fmt: off
@app.command(help="Insert or replace [Authorize] attributes as listed in MAPPINGS.")
def apply(
    mappings: Path = typer.Argument(..., help="CSV with Filename,Controller,Method,Attribute rows"),
    root: Path = typer.Argument(..., help="Root directory of the controller files"),
    preview: bool = typer.Option(False, "--preview", help="Show changes without modifying files", rich_help_panel="Mode"),
    overwrite: bool = typer.Option(False, "--overwrite", help="Replace existing attributes without prompting", rich_help_panel="Mode"),
    confirm_inserts: bool | None = typer.Option(None, "--confirm-inserts/--no-confirm-inserts", help="Also ask before inserting new attributes", rich_help_panel="Mode"),
    config_spec: list[str] | None = typer.Option(None, "-c", "--config", help=_CONFIG_SPEC_HELP_TEXT, rich_help_panel="Basic"),
    log_dir: str | None = typer.Option(None, "--log-dir", help="Directory for the run log", rich_help_panel="Basic"),
) -> None:
    # fmt: on
    mode = Mode.PREVIEW if preview else Mode.OVERWRITE if overwrite else None
    raise typer.Exit(
        apply_mappings(mappings, root, mode=mode, confirm_inserts=confirm_inserts, config_spec=config_spec, log_dir=log_dir)
    )


# fmt: off
@app.command(help="Find routable actions under ROOT and write a mapping template.")
def scan(
    root: Path = typer.Argument(..., help="Root directory of the controller files"),
    output: str | None = typer.Option(None, "-o", "--output", help="Template CSV to write", rich_help_panel="Basic"),
    config_spec: list[str] | None = typer.Option(None, "-c", "--config", help=_CONFIG_SPEC_HELP_TEXT, rich_help_panel="Basic"),
    log_dir: str | None = typer.Option(None, "--log-dir", help="Directory for the run log", rich_help_panel="Basic"),
) -> None:
    # fmt: on
    raise typer.Exit(scan_controllers(root, output=output, config_spec=config_spec, log_dir=log_dir))


if __name__ == "__main__":
    app()
