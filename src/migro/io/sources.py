"""Read and write source files as line sequences."""

import codecs
import os
import tempfile
from dataclasses import dataclass, replace
from pathlib import Path

from migro.exceptions import SourceNotFoundError, SourceReadError, SourceWriteError


@dataclass(frozen=True)
class SourceFile:
    path: Path
    lines: tuple[str, ...]
    newline: str = "\n"
    bom: bool = False

    def with_lines(self, lines) -> "SourceFile":
        return replace(self, lines=tuple(lines))

    def render(self) -> str:
        """Join the lines back together, always ending with exactly one newline."""
        return self.newline.join(self.lines) + self.newline


def split_lines(text: str) -> tuple[list[str], str]:
    """Split on `\\n`, drop a trailing `\\r` per line and report the dominant newline."""
    newline = "\r\n" if "\r\n" in text else "\n"
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines], newline


def read_source(path: Path | str) -> SourceFile:
    path = Path(path)
    try:
        data = path.read_bytes()
    except FileNotFoundError as e:
        raise SourceNotFoundError(f"File not found: {path}") from e
    except OSError as e:
        raise SourceReadError(f"Could not read {path}: {e}") from e
    bom = data.startswith(codecs.BOM_UTF8)
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise SourceReadError(f"Could not decode {path} as UTF-8: {e}") from e
    lines, newline = split_lines(text)
    return SourceFile(path=path, lines=tuple(lines), newline=newline, bom=bom)


def write_source(source: SourceFile, path: Path | str | None = None) -> Path:
    """Write `source` through a temporary file and swap it into place.

    On failure the previous content at the target path is left as it was.
    Symlinks are followed, so the link stays and its target is rewritten. The
    temporary file lives next to the real target, so its directory must be
    writable even when the file itself is.
    """
    target = (Path(path) if path is not None else source.path).resolve()
    payload = source.render().encode("utf-8")
    if source.bom:
        payload = codecs.BOM_UTF8 + payload
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
        os.chmod(tmp_name, target.stat().st_mode & 0o7777 if target.exists() else 0o644)
        os.replace(tmp_name, target)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise SourceWriteError(f"Could not write {target}: {e}") from e
    return target
