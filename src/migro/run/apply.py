"""Apply direction: rewrite authorize attributes as directed by a mapping CSV."""

from pathlib import Path

from jinja2 import StrictUndefined, Template
from pydantic import BaseModel

from migro.engine.block import resolve_block
from migro.engine.locate import find_method
from migro.engine.plan import EditPlan, PlanKind, apply_plan, plan_edit
from migro.engine.policy import Mode, Outcome, RunContext, RunStats, decide
from migro.exceptions import MappingSourceError, SourceNotFoundError, SourceReadError, SourceWriteError
from migro.io.mappings import MappingRow, read_mappings
from migro.io.sources import read_source, write_source

RULE = "=" * 51

MODE_BANNERS = {
    Mode.PREVIEW: "Mode: PREVIEW - No files will be modified",
    Mode.OVERWRITE: "Mode: OVERWRITE - Existing attributes will be replaced automatically",
    Mode.INTERACTIVE: "Mode: INTERACTIVE - Will prompt for confirmation on conflicts",
}


class ApplyConfig(BaseModel):
    mode: Mode = Mode.INTERACTIVE
    confirm_inserts: bool = False
    """Also ask before inserting a new attribute in interactive mode."""
    log_dir: str = "logs"
    summary_template: str = "Files Modified: {{ stats.files_modified }}"
    """Jinja2 template for the end-of-run summary. Gets `stats` and `rule`."""


def render_summary(template: str, stats: RunStats) -> str:
    return Template(template, undefined=StrictUndefined).render(stats=stats, rule=RULE)


def log_summary(ctx: RunContext, template: str) -> None:
    for line in render_summary(template, ctx.stats).splitlines():
        ctx.logger.info(line)


def _describe_plan(ctx: RunContext, row: MappingRow, plan: EditPlan) -> None:
    log = ctx.logger
    log.info(f"📄 File: {row.filename}")
    log.info(f"🔧 Method: {row.method}")
    if plan.kind is PlanKind.REPLACE:
        log.info("🔁 Found existing attribute(s) to replace/clean up:")
        for old in plan.old_lines:
            log.info(f"   OLD: {old}")
    else:
        log.info("➕ Inserting new attribute for method")
    log.info(f"   NEW: {plan.new_line.strip()}")


def _process_row(row: MappingRow, root: Path, ctx: RunContext) -> tuple[Outcome, PlanKind | None]:
    log = ctx.logger
    path = root / row.filename
    log.debug(f"Processing file: {row.filename}, Method: {row.method}")

    try:
        source = read_source(path)
    except (SourceNotFoundError, SourceReadError) as e:
        log.error(f"ERROR: Skipping file {row.filename}: {e}")
        return Outcome.ERROR, None
    log.debug(f"Opened {path} ({len(source.lines)} lines)")
    lines = source.lines

    index = find_method(lines, row.method)
    if index is None:
        log.warning(f"WARNING: Method '{row.method}' not found in file '{row.filename}'")
        return Outcome.NOT_FOUND, None

    block = resolve_block(lines, index, ctx.engine.blank_lines)
    for j, role in block.roles:
        log.debug(f"   line {j + 1} [{role.value}]: {lines[j].strip()}")
    if not block.has_verb:
        log.warning(
            f"WARNING: Could not find an HTTP attribute for method '{row.method}' in '{row.filename}'. Skipping."
        )
        return Outcome.INELIGIBLE, None

    plan = plan_edit(lines, block, row.attribute)
    if plan.kind is PlanKind.NOOP:
        log.info(f"INFO: Attribute already correct for {row.filename}:{row.method}.")
        return Outcome.NOOP, plan.kind

    _describe_plan(ctx, row, plan)
    outcome = decide(plan, ctx)
    if outcome is not Outcome.APPLIED:
        return outcome, plan.kind

    try:
        write_source(source.with_lines(apply_plan(lines, plan)))
    except SourceWriteError as e:
        log.error(f"ERROR: Writing updated file {path}: {e}")
        return Outcome.ERROR, plan.kind
    log.info(f"✅ Successfully updated: {row.filename}")
    return Outcome.APPLIED, plan.kind


def process_row(row: MappingRow, root: Path | str, ctx: RunContext) -> Outcome:
    """Process one mapping row end to end and count its outcome."""
    try:
        outcome, kind = _process_row(row, Path(root), ctx)
    except Exception as e:
        ctx.logger.error(f"ERROR: Unexpected failure on {row.filename}:{row.method}: {e}", exc_info=True)
        outcome, kind = Outcome.ERROR, None
    ctx.stats.record(outcome, kind)
    return outcome


def run_apply(mappings_path: Path | str, root: Path | str, ctx: RunContext, config: ApplyConfig) -> int:
    """Run the whole apply direction. Returns the process exit code."""
    log = ctx.logger
    log.info("Starting C# Attribute Updater")
    log.info(f"CSV File: {mappings_path}")
    log.info(f"Controllers Directory: {root}")
    log.info(MODE_BANNERS[ctx.mode])
    log.info("-" * 51)

    try:
        rows = read_mappings(mappings_path, log=log)
    except MappingSourceError as e:
        log.error(f"FATAL ERROR: {e}")
        ctx.stats.errors += 1
        log_summary(ctx, config.summary_template)
        return 1

    log.info(f"Loaded {len(rows)} mappings from CSV")
    for row in rows:
        process_row(row, root, ctx)

    if ctx.mode is Mode.PREVIEW:
        log.info("✨ Preview complete. No files were modified.")
    else:
        log.info("✨ All operations complete.")
    log_summary(ctx, config.summary_template)
    return 0
