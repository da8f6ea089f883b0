"""Scan direction: list routable actions and write a mapping template."""

import fnmatch
import re
from collections.abc import Iterator
from pathlib import Path

from pydantic import BaseModel

from migro.engine.block import resolve_block
from migro.engine.classify import is_authorize_attribute
from migro.engine.locate import find_declarations
from migro.engine.policy import RunContext
from migro.exceptions import SourceNotFoundError, SourceReadError
from migro.io.mappings import MappingRow, write_template
from migro.io.sources import read_source

CLASS_PATTERN = re.compile(r"\bclass\s+(\w+)")


class ScanConfig(BaseModel):
    include: list[str] = ["*.cs"]
    """Glob patterns matched against file names."""
    exclude_dirs: list[str] = ["bin", "obj", ".git"]
    """Directory names that are never descended into."""
    placeholder: str = ""
    """Attribute column for actions that have no authorize attribute."""
    output: str = "mappings_template.csv"
    log_dir: str = "logs"


def iter_source_files(root: Path, include: list[str], exclude_dirs: list[str]) -> Iterator[Path]:
    """Yield matching files under `root` in a stable order."""
    for path in sorted(root.rglob("*")):
        rel_parts = path.relative_to(root).parts
        if any(part in exclude_dirs for part in rel_parts[:-1]):
            continue
        if path.is_file() and any(fnmatch.fnmatch(path.name, pattern) for pattern in include):
            yield path


def scan_lines(lines, filename: str, ctx: RunContext, placeholder: str = "") -> list[MappingRow]:
    """Return one template row per declaration that carries an HTTP verb attribute."""
    log = ctx.logger
    rows = []
    controller = Path(filename).stem
    declarations = dict(find_declarations(lines))
    for i, line in enumerate(lines):
        if m := CLASS_PATTERN.search(line):
            controller = m.group(1)
        if i not in declarations:
            continue
        method = declarations[i]
        block = resolve_block(lines, i, ctx.engine.blank_lines)
        if not block.has_verb:
            log.debug(f"Skipping {filename}:{method}, no HTTP attribute")
            continue
        authorize = block.authorize_indices
        if len(authorize) > 1:
            log.warning(f"WARNING: {filename}:{method} has {len(authorize)} authorize attributes, using the nearest")
        attribute = lines[authorize[0]].strip() if authorize else placeholder
        rows.append(MappingRow(filename=filename, controller=controller, method=method, attribute=attribute))
    return rows


def run_scan(root: Path | str, output: Path | str, ctx: RunContext, config: ScanConfig) -> int:
    """Scan `root` and write the template to `output`. Returns the process exit code."""
    log = ctx.logger
    root = Path(root)
    log.info("Starting C# Attribute Scanner")
    log.info(f"Controllers Directory: {root}")
    log.info(f"Output File: {output}")
    log.info("-" * 51)
    if not root.is_dir():
        log.error(f"FATAL ERROR: Controllers directory '{root}' does not exist")
        return 1

    rows: list[MappingRow] = []
    for path in iter_source_files(root, config.include, config.exclude_dirs):
        filename = path.relative_to(root).as_posix()
        ctx.stats.total_files += 1
        try:
            source = read_source(path)
        except (SourceNotFoundError, SourceReadError) as e:
            log.error(f"ERROR: Skipping file {filename}: {e}")
            ctx.stats.files_skipped += 1
            ctx.stats.errors += 1
            continue
        found = scan_lines(source.lines, filename, ctx, config.placeholder)
        log.debug(f"Scanned {filename}: {len(found)} endpoint(s)")
        rows.extend(found)

    try:
        write_template(output, rows)
    except OSError as e:
        log.error(f"FATAL ERROR: Could not write template '{output}': {e}")
        ctx.stats.errors += 1
        return 1
    with_authorize = sum(1 for row in rows if is_authorize_attribute(row.attribute))
    log.info(f"Files Scanned: {ctx.stats.total_files}")
    log.info(f"Endpoints Found: {len(rows)}")
    log.info(f"Endpoints With Authorize: {with_authorize}")
    log.info(f"Errors Encountered: {ctx.stats.errors}")
    log.info(f"✨ Template written to: {output}")
    return 0
