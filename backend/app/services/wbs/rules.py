"""Type-conditioned rules for WBS item payloads.

Every rule is an independent predicate with the field path and message to
report when it fails. ``validate_wbs_item`` runs all rules that apply to the
payload's type and raises a single ``ValidationError`` listing every failure,
so a form can show all of them at once.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Mapping

from app.core.errors import FieldError, ValidationError
from app.core.logging import logger
from app.db.models.wbs import WbsType
from app.schemas.wbs import WbsItemCreate
from app.services.etl.utils import to_decimal

BUDGET_TYPES = frozenset({WbsType.summary, WbsType.work_package})
SCHEDULE_TYPES = frozenset({WbsType.activity})


@dataclass(frozen=True)
class Rule:
    types: frozenset[WbsType]
    check: Callable[[Mapping[str, Any]], bool]
    path: str
    message: str


def _budget(p: Mapping[str, Any]) -> Decimal | None:
    return to_decimal(p.get("budgeted_cost"))


def _has_budget(p: Mapping[str, Any]) -> bool:
    b = _budget(p)
    return b is not None and b >= 0


def _has_no_dates(p: Mapping[str, Any]) -> bool:
    return p.get("start_date") is None and p.get("end_date") is None


def _has_zero_budget(p: Mapping[str, Any]) -> bool:
    return _budget(p) == 0


def _has_schedule(p: Mapping[str, Any]) -> bool:
    duration = p.get("duration")
    return (
        p.get("start_date") is not None
        and p.get("end_date") is not None
        and duration is not None
        and duration > 0
    )


WBS_RULES: tuple[Rule, ...] = (
    Rule(BUDGET_TYPES, _has_budget, "budgeted_cost", "Summary and WorkPackage types must have a budget"),
    Rule(BUDGET_TYPES, _has_no_dates, "start_date", "Summary and WorkPackage types should not have dates"),
    Rule(SCHEDULE_TYPES, _has_zero_budget, "budgeted_cost", "Activity types cannot have a budget amount"),
    Rule(SCHEDULE_TYPES, _has_schedule, "start_date", "Activity types must have start date, end date, and duration"),
)


def collect_errors(payload: Mapping[str, Any], rules: tuple[Rule, ...] = WBS_RULES) -> list[FieldError]:
    wbs_type = WbsType(payload["type"])
    return [FieldError(r.path, r.message) for r in rules if wbs_type in r.types and not r.check(payload)]


def validate_wbs_item(data: WbsItemCreate) -> WbsItemCreate:
    """Accept or reject a candidate item; returns the normalized payload, no side effects."""
    errors = collect_errors(data.model_dump())
    if errors:
        logger.debug("wbs_item_rejected", code=data.code, type=data.type.value, errors=[e.message for e in errors])
        raise ValidationError(errors)

    if data.type == WbsType.activity:
        return data.model_copy(update={"budgeted_cost": Decimal("0")})
    return data.model_copy(update={"budgeted_cost": _budget(data.model_dump()), "duration": None})
