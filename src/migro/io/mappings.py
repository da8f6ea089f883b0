"""The CSV that binds (file, method) pairs to a desired authorize attribute."""

import csv
import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel

from migro.exceptions import MappingSourceError
from migro.utils.log import logger

TEMPLATE_HEADER = ("Filename", "Controller", "Method", "Attribute")


class MappingRow(BaseModel):
    filename: str
    """Path of the source file relative to the controllers directory."""
    controller: str
    method: str
    attribute: str
    """Full attribute text, e.g. `[Authorize(Roles = "Admin")]`."""

    def as_row(self) -> list[str]:
        return [self.filename, self.controller, self.method, self.attribute]


def read_mappings(path: Path | str, log: logging.Logger = logger) -> list[MappingRow]:
    """Load mapping rows, skipping the header.

    Short rows and rows without an attribute are dropped with a warning. Any
    failure to open or parse the file raises `MappingSourceError`.
    """
    path = Path(path)
    try:
        with path.open(newline="", encoding="utf-8-sig") as f:
            records = list(csv.reader(f, skipinitialspace=True))
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise MappingSourceError(f"Failed to read CSV file '{path}': {e}") from e

    rows = []
    for record in records[1:]:
        if not record:
            continue
        if len(record) < 4:
            log.warning(f"WARNING: Skipping incomplete row in CSV: {record}")
            continue
        filename, controller, method, attribute = (field.strip() for field in record[:4])
        if not attribute:
            log.warning(f"WARNING: Skipping row without an attribute in CSV: {record}")
            continue
        rows.append(MappingRow(filename=filename, controller=controller, method=method, attribute=attribute))
    return rows


def write_template(path: Path | str, rows: Iterable[MappingRow]) -> int:
    """Write `rows` under the fixed header. Returns the number of data rows written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    n = 0
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(TEMPLATE_HEADER)
        for row in rows:
            writer.writerow(row.as_row())
            n += 1
    return n
