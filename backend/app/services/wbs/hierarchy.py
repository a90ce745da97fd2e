"""Tree-position, parent/child type and budget rollup rules for WBS items.

Functions here work on anything shaped like ``WbsItem`` (ORM rows or plain
attribute holders), so they can be exercised without a
database. Rule failures are returned as ``FieldError`` lists or raised as
``ValidationError`` so callers can report all of them at once.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Protocol

from app.core.errors import FieldError, ValidationError
from app.db.models.wbs import WbsType

ALLOWED_CHILD_TYPES: dict[WbsType, frozenset[WbsType]] = {
    WbsType.summary: frozenset({WbsType.summary, WbsType.work_package}),
    WbsType.work_package: frozenset({WbsType.activity}),
    WbsType.activity: frozenset(),
}


class WbsLike(Protocol):
    id: int
    parent_id: int | None
    code: str
    level: int
    type: str
    budgeted_cost: Decimal
    actual_cost: Decimal


@dataclass(frozen=True)
class Placement:
    level: int
    code: str
    is_top_level: bool


@dataclass
class WbsNode:
    item: WbsLike
    children: list["WbsNode"] = field(default_factory=list)
    rolled_up_budget: Decimal = Decimal("0")
    rolled_up_actual: Decimal = Decimal("0")


def code_sort_key(code: str) -> tuple:
    return tuple((0, int(p), "") if p.isdigit() else (1, 0, p) for p in code.split("."))


def split_code(code: str) -> tuple[int, str | None]:
    """'1.2.3' -> (3, '1.2'); '4' -> (1, None)."""
    parts = [p.strip() for p in code.strip().split(".")]
    if not all(parts):
        raise ValidationError([FieldError("code", f"Malformed WBS code '{code}'")])
    return len(parts), ".".join(parts[:-1]) or None


def next_child_code(parent_code: str | None, sibling_codes: Iterable[str]) -> str:
    ordinals = [int(c.rsplit(".", 1)[-1]) for c in sibling_codes if c.rsplit(".", 1)[-1].isdigit()]
    n = max(ordinals, default=0) + 1
    return f"{parent_code}.{n}" if parent_code else str(n)


def child_type_message(parent_type: WbsType, child_type: WbsType) -> str | None:
    if child_type in ALLOWED_CHILD_TYPES[parent_type]:
        return None
    if parent_type == WbsType.activity:
        return "'Activity' items cannot have children"
    if parent_type == WbsType.summary:
        return "A 'Summary' WBS item cannot have an 'Activity' as a direct child. It must have a 'WorkPackage' in between."
    return "A 'WorkPackage' can only have 'Activity' items as children"


def place_item(
    wbs_type: WbsType,
    parent: WbsLike | None,
    siblings: Iterable[WbsLike],
    max_level: int,
    code: str | None = None,
) -> Placement:
    errors: list[FieldError] = []
    if parent is None:
        level = 1
        if wbs_type != WbsType.summary:
            errors.append(FieldError("type", "Top-level WBS items must be of type 'Summary'"))
    else:
        level = parent.level + 1
        if level > max_level:
            errors.append(FieldError("parent_id", f"Maximum WBS hierarchy level ({max_level}) reached"))
        msg = child_type_message(WbsType(parent.type), wbs_type)
        if msg:
            errors.append(FieldError("type", msg))

    if code:
        code_level, parent_code = split_code(code)
        expected_parent = parent.code if parent is not None else None
        if code_level != level or parent_code != expected_parent:
            errors.append(FieldError("code", f"Code '{code}' does not match its position in the tree"))

    if errors:
        raise ValidationError(errors)
    return Placement(
        level=level,
        code=code or next_child_code(parent.code if parent is not None else None, [s.code for s in siblings]),
        is_top_level=parent is None,
    )


def check_child_budget(
    parent: WbsLike | None,
    siblings: Iterable[WbsLike],
    budget: Decimal | None,
    exclude_id: int | None = None,
) -> list[FieldError]:
    if parent is None or budget is None:
        return []
    errors: list[FieldError] = []
    if budget > parent.budgeted_cost:
        errors.append(FieldError("budgeted_cost", f"Budget cannot exceed parent's budget of {parent.budgeted_cost}"))
    total = sum((s.budgeted_cost for s in siblings if s.id != exclude_id), Decimal("0")) + budget
    if total > parent.budgeted_cost:
        errors.append(
            FieldError(
                "budgeted_cost",
                f"Sum of all child budgets ({total}) cannot exceed parent's budget ({parent.budgeted_cost})",
            )
        )
    return errors


def check_budget_floor(children: Iterable[WbsLike], budget: Decimal) -> list[FieldError]:
    child_sum = sum((c.budgeted_cost for c in children if c.type != WbsType.activity.value), Decimal("0"))
    if child_sum > budget:
        return [FieldError("budgeted_cost", f"Budget cannot be less than the sum of child budgets ({child_sum})")]
    return []


def check_type_change(
    item: WbsLike,
    parent: WbsLike | None,
    children: list[WbsLike],
    new_type: WbsType,
    is_top_level: bool,
) -> list[FieldError]:
    if new_type.value == item.type:
        return []
    if is_top_level and new_type != WbsType.summary:
        return [FieldError("type", "Top-level WBS items must be of type 'Summary'")]
    if parent is not None:
        msg = child_type_message(WbsType(parent.type), new_type)
        if msg:
            return [FieldError("type", msg)]
    if children and new_type == WbsType.activity:
        return [FieldError("type", "Cannot change to 'Activity' type because this item has children")]
    if new_type == WbsType.work_package and any(c.type != WbsType.activity.value for c in children):
        return [FieldError("type", "Cannot change to 'WorkPackage' type because this item has non-Activity children")]
    if new_type == WbsType.summary and any(c.type == WbsType.activity.value for c in children):
        return [FieldError("type", "Cannot change to 'Summary' type because this item has Activity children")]
    return []


def build_tree(items: Iterable[WbsLike]) -> list[WbsNode]:
    """Nest items by parent, ordered by code, with budget and actual-cost rollups.

    A Summary's rolled-up budget is the sum of its budget-carrying children;
    items without such children report their own budget. Actual cost adds an
    item's own ledger to everything below it.
    """
    nodes = {i.id: WbsNode(item=i) for i in sorted(items, key=lambda i: code_sort_key(i.code))}
    roots: list[WbsNode] = []
    for node in nodes.values():
        parent = nodes.get(node.item.parent_id) if node.item.parent_id is not None else None
        (parent.children if parent is not None else roots).append(node)

    def rollup(node: WbsNode) -> None:
        for child in node.children:
            rollup(child)
        budget_children = [c for c in node.children if c.item.type != WbsType.activity.value]
        if budget_children:
            node.rolled_up_budget = sum((c.rolled_up_budget for c in budget_children), Decimal("0"))
        else:
            node.rolled_up_budget = node.item.budgeted_cost or Decimal("0")
        node.rolled_up_actual = (node.item.actual_cost or Decimal("0")) + sum(
            (c.rolled_up_actual for c in node.children), Decimal("0")
        )

    for root in roots:
        rollup(root)
    return roots
