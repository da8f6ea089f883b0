"""Find method declarations in a line sequence.

Both lookups are text heuristics, not a C# parser. `find_method` matches
`" <name>("` anywhere in a line, so a call site, a comment or a longer
identifier ending in `name` that appears first wins. That imprecision is
accepted; callers only use it on controller files.
"""

import re
from collections.abc import Iterator, Sequence

VISIBILITY = ("public", "private", "protected", "internal")
MODIFIERS = ("static", "virtual", "override", "async", "abstract", "sealed", "new", "extern", "unsafe", "partial")

DECLARATION_PATTERN = re.compile(
    r"^\s*(?:" + "|".join(VISIBILITY) + r")\s+"
    r"(?:(?:" + "|".join(MODIFIERS) + r")\s+)*"
    r"(?P<return_type>[\w<>\[\],.?]+(?:,\s*[\w<>\[\],.?]+)*)\s+"
    r"(?P<name>\w+)\s*\("
)


def find_method(lines: Sequence[str], name: str) -> int | None:
    """Return the index of the first line containing `" <name>("`, or None."""
    needle = f" {name}("
    for i, line in enumerate(lines):
        if needle in line:
            return i
    return None


def find_declarations(lines: Sequence[str]) -> Iterator[tuple[int, str]]:
    """Yield `(index, method_name)` for every line that looks like a method declaration.

    A declaration is a visibility keyword, optional modifiers, a return type and an
    identifier followed by `(`. Constructors have no return type and are not reported.
    """
    for i, line in enumerate(lines):
        if m := DECLARATION_PATTERN.match(line):
            yield i, m.group("name")
