"""Attribute block engine: classify, locate, resolve, plan, decide."""

from migro.engine.block import AttributeBlock, BoundaryPolicy, LineRole, resolve_block
from migro.engine.classify import is_authorize_attribute, is_verb_attribute
from migro.engine.locate import find_declarations, find_method
from migro.engine.plan import EditPlan, PlanKind, apply_plan, plan_edit
from migro.engine.policy import EngineConfig, Mode, Outcome, RunContext, RunStats, decide

__all__ = [
    "AttributeBlock",
    "BoundaryPolicy",
    "EditPlan",
    "EngineConfig",
    "LineRole",
    "Mode",
    "Outcome",
    "PlanKind",
    "RunContext",
    "RunStats",
    "apply_plan",
    "decide",
    "find_declarations",
    "find_method",
    "is_authorize_attribute",
    "is_verb_attribute",
    "plan_edit",
    "resolve_block",
]
