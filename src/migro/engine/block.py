"""Resolve the attribute block that sits directly above a method declaration."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from migro.engine.classify import (
    is_attribute_line,
    is_authorize_attribute,
    is_verb_attribute,
    leading_whitespace,
)


class BoundaryPolicy(str, Enum):
    """What a blank line does to the upward scan."""

    SKIP = "skip"
    TERMINATE = "terminate"


class LineRole(str, Enum):
    VERB = "verb"
    AUTHORIZE = "authorize"
    OTHER = "other"
    BLANK = "blank"


def classify_line(line: str) -> LineRole:
    if not line.strip():
        return LineRole.BLANK
    if is_verb_attribute(line):
        return LineRole.VERB
    if is_authorize_attribute(line):
        return LineRole.AUTHORIZE
    return LineRole.OTHER


@dataclass(frozen=True)
class AttributeBlock:
    """The half-open range `[start, method_index)` of attribute lines above a method."""

    method_index: int
    start: int
    verb_index: int | None = None
    """Index of the HTTP verb attribute. The method is not editable without one."""
    authorize_indices: tuple[int, ...] = ()
    """Indices of authorize attributes, nearest to the method first."""
    indent: str = ""
    """Leading whitespace of the verb attribute line."""
    roles: tuple[tuple[int, LineRole], ...] = field(default=(), compare=False)
    """Every line visited by the scan with its role, nearest first."""

    @property
    def has_verb(self) -> bool:
        return self.verb_index is not None

    @property
    def is_empty(self) -> bool:
        return self.start == self.method_index


def resolve_block(
    lines: Sequence[str],
    method_index: int,
    policy: BoundaryPolicy = BoundaryPolicy.SKIP,
) -> AttributeBlock:
    """Scan upwards from `method_index` and collect the attribute block.

    Lines starting with `[` extend the block. Any other non-blank line ends it.
    Blank lines are either stepped over or end the block, depending on `policy`.
    When several verb attributes are present the topmost one is the anchor.
    """
    start = method_index
    verb_index = None
    authorize_indices: list[int] = []
    roles: list[tuple[int, LineRole]] = []

    for j in range(method_index - 1, -1, -1):
        line = lines[j]
        role = classify_line(line)
        if role is LineRole.BLANK:
            roles.append((j, role))
            if policy is BoundaryPolicy.TERMINATE:
                break
            continue
        if not is_attribute_line(line):
            break
        roles.append((j, role))
        start = j
        if role is LineRole.VERB:
            verb_index = j
        elif role is LineRole.AUTHORIZE:
            authorize_indices.append(j)

    indent = leading_whitespace(lines[verb_index]) if verb_index is not None else ""
    return AttributeBlock(
        method_index=method_index,
        start=start,
        verb_index=verb_index,
        authorize_indices=tuple(authorize_indices),
        indent=indent,
        roles=tuple(roles),
    )
