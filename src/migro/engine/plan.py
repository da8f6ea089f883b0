"""Decide how an attribute block has to change and produce the rewritten lines."""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from migro.engine.block import AttributeBlock


class PlanKind(str, Enum):
    NOOP = "noop"
    INSERT = "insert"
    REPLACE = "replace"


@dataclass(frozen=True)
class EditPlan:
    kind: PlanKind
    insert_at: int
    new_line: str
    remove: frozenset[int] = frozenset()
    old_lines: tuple[str, ...] = ()
    """Trimmed authorize lines being replaced, in file order."""

    @property
    def changes_file(self) -> bool:
        return self.kind is not PlanKind.NOOP


def plan_edit(lines: Sequence[str], block: AttributeBlock, attribute: str) -> EditPlan:
    """Compare the block's authorize attributes against `attribute`.

    A single authorize line equal to the desired one (ignoring surrounding
    whitespace) is a no-op. Otherwise every authorize line is dropped and one
    new line, indented like the verb attribute, goes to the top of the block.
    """
    new_line = block.indent + attribute
    authorize = block.authorize_indices

    if len(authorize) == 1 and lines[authorize[0]].strip() == new_line.strip():
        return EditPlan(PlanKind.NOOP, insert_at=block.start, new_line=new_line)

    if authorize:
        return EditPlan(
            PlanKind.REPLACE,
            insert_at=block.start,
            new_line=new_line,
            remove=frozenset(authorize),
            old_lines=tuple(lines[i].strip() for i in sorted(authorize)),
        )

    return EditPlan(PlanKind.INSERT, insert_at=block.start, new_line=new_line)


def apply_plan(lines: Sequence[str], plan: EditPlan) -> list[str]:
    """Return a new line list with `plan` applied. `lines` is left untouched."""
    if not plan.changes_file:
        return list(lines)
    result = list(lines[: plan.insert_at])
    result.append(plan.new_line)
    result.extend(line for i, line in enumerate(lines[plan.insert_at :], start=plan.insert_at) if i not in plan.remove)
    return result
