from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal
from io import BytesIO
from typing import Literal

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import DomainError, ReferentialError, StructuralError, ValidationError
from app.core.logging import logger
from app.crud.imports import add_import_errors, create_import_run, set_import_status
from app.db.models.cost_entry import CostEntry
from app.db.models.import_run import ImportRun
from app.db.models.wbs import WbsItem, WbsType
from app.schemas.wbs import WbsItemCreate
from app.services.etl.parsers.costs_csv import parse_costs_csv
from app.services.etl.parsers.wbs_csv import ParseResult, WbsRow, parse_wbs_csv
from app.services.etl.parsers.wbs_xlsx import read_wbs_workbook
from app.services.etl.utils import bytes_sha256, decode_text, inclusive_days
from app.services.etl.validators import RowError
from app.services.wbs.hierarchy import check_budget_floor, check_child_budget, check_type_change, place_item, split_code
from app.services.wbs.rules import validate_wbs_item

FileKind = Literal["csv", "xlsx"]


@dataclass
class WbsImportResult:
    run: ImportRun
    created: int = 0
    updated: int = 0
    errors: list[RowError] = field(default_factory=list)


@dataclass
class CostImportResult:
    run: ImportRun
    created: list[CostEntry] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)


def detect_kind(file_name: str) -> FileKind:
    name = file_name.lower()
    if name.endswith(".csv"):
        return "csv"
    if name.endswith(".xlsx"):
        return "xlsx"
    raise StructuralError("Only .csv and .xlsx files are supported")


def parse_wbs_file(data: bytes, kind: FileKind) -> ParseResult:
    if len(data) > settings.MAX_IMPORT_BYTES:
        raise StructuralError(f"File is larger than {settings.MAX_IMPORT_BYTES} bytes")
    if kind == "xlsx":
        return read_wbs_workbook(BytesIO(data))
    try:
        text = decode_text(data)
    except UnicodeDecodeError as e:
        raise StructuralError("CSV file must be UTF-8 encoded") from e
    return parse_wbs_csv(text)


def _row_errors(row: WbsRow, exc: DomainError) -> list[RowError]:
    if isinstance(exc, ValidationError):
        return [RowError(e.message, row.line, e.path) for e in exc.errors]
    return [RowError(exc.message, row.line)]


def _apply_row(db: Session, project_id: int, row: WbsRow, by_code: dict[str, WbsItem]) -> bool:
    """Place, validate and upsert one parsed row; returns True when a new item was created."""
    _, parent_code = split_code(row.code)
    parent = None
    if parent_code is not None:
        parent = by_code.get(parent_code)
        if parent is None:
            raise ReferentialError(f"Parent WBS item with code '{parent_code}' not found")

    duration = row.duration
    if row.type == WbsType.activity and duration is None and row.start_date and row.end_date:
        duration = inclusive_days(row.start_date, row.end_date)

    payload = validate_wbs_item(
        WbsItemCreate(
            project_id=project_id,
            parent_id=parent.id if parent is not None else None,
            name=row.name,
            description=row.description,
            type=row.type,
            code=row.code,
            budgeted_cost=row.amount,
            start_date=row.start_date,
            end_date=row.end_date,
            duration=duration,
        )
    )

    existing = by_code.get(row.code)
    siblings = [i for i in by_code.values() if i.parent_id == (parent.id if parent is not None else None)]
    placement = place_item(payload.type, parent, siblings, settings.MAX_WBS_LEVEL, code=row.code)
    children = [i for i in by_code.values() if existing is not None and i.parent_id == existing.id]
    errors = []
    if existing is not None:
        errors += check_type_change(existing, parent, children, payload.type, placement.is_top_level)
    if payload.type != WbsType.activity:
        errors += check_child_budget(
            parent, siblings, payload.budgeted_cost, exclude_id=existing.id if existing is not None else None
        )
        errors += check_budget_floor(children, payload.budgeted_cost)
    if errors:
        raise ValidationError(errors)

    values = payload.model_dump(exclude={"project_id", "code"})
    values["type"] = payload.type.value
    if existing is not None:
        for k, v in values.items():
            setattr(existing, k, v)
        existing.level = placement.level
        existing.is_top_level = placement.is_top_level
        db.flush()
        return False

    item = WbsItem(
        project_id=project_id,
        code=placement.code,
        level=placement.level,
        is_top_level=placement.is_top_level,
        **values,
    )
    db.add(item)
    db.flush()
    by_code[item.code] = item
    return True


def import_wbs_rows(db: Session, project_id: int, rows: list[WbsRow]) -> tuple[int, int, list[RowError]]:
    """Persist parsed rows in file order.

    Every rule is checked before a row touches the session, so a rejected row
    leaves nothing behind and later rows still import.
    """
    by_code = {i.code: i for i in db.query(WbsItem).filter(WbsItem.project_id == project_id).all()}
    created = updated = 0
    errors: list[RowError] = []
    for row in rows:
        try:
            is_new = _apply_row(db, project_id, row, by_code)
        except DomainError as e:
            errors.extend(_row_errors(row, e))
            continue
        except PydanticValidationError as e:
            errors.extend(RowError(err["msg"], row.line, ".".join(str(p) for p in err["loc"])) for err in e.errors())
            continue
        if is_new:
            created += 1
        else:
            updated += 1
    return created, updated, errors


def _finish(db: Session, run: ImportRun, rows_loaded: int, errors: list[RowError]) -> None:
    add_import_errors(db, run.id, errors)
    status = "success_with_errors" if errors else "success"
    if rows_loaded == 0 and errors:
        status = "failed"
    set_import_status(db, run.id, status, finished_at=dt.datetime.now(dt.timezone.utc), rows_loaded=rows_loaded)
    db.refresh(run)


def run_wbs_import(db: Session, project_id: int, file_name: str, data: bytes) -> WbsImportResult:
    kind = detect_kind(file_name)
    run = create_import_run(db, project_id, "wbs", file_name, bytes_sha256(data))
    logger.info("wbs_import_start", import_run_id=run.id, project_id=project_id, file_name=file_name, kind=kind)

    try:
        parsed = parse_wbs_file(data, kind)
        created, updated, persist_errors = import_wbs_rows(db, project_id, parsed.rows)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.exception("wbs_import_failed", import_run_id=run.id, error=str(e))
        _finish(db, run, 0, [RowError(str(e))])
        raise

    errors = parsed.errors + persist_errors
    errors.sort(key=lambda e: e.row_num or 0)
    _finish(db, run, created + updated, errors)
    logger.info(
        "wbs_import_finished",
        import_run_id=run.id,
        project_id=project_id,
        created=created,
        updated=updated,
        errors=len(errors),
    )
    return WbsImportResult(run=run, created=created, updated=updated, errors=errors)


def _load_cost_rows(db: Session, project_id: int, data: bytes) -> tuple[list[CostEntry], list[RowError]]:
    try:
        text = decode_text(data)
    except UnicodeDecodeError as e:
        raise StructuralError("CSV file must be UTF-8 encoded") from e
    rows, errors = parse_costs_csv(text)
    by_code = {i.code: i for i in db.query(WbsItem).filter(WbsItem.project_id == project_id).all()}
    created: list[CostEntry] = []
    for row in rows:
        item = by_code.get(row.wbs_code)
        if item is None:
            errors.append(RowError(f"WBS code '{row.wbs_code}' not found", row.line, "wbsCode"))
            continue
        if item.type == WbsType.activity.value:
            errors.append(
                RowError("Cost entries can only be recorded against Summary or WorkPackage items", row.line, "wbsCode")
            )
            continue
        entry = CostEntry(wbs_item_id=item.id, amount=row.amount, description=row.description, entry_date=row.entry_date)
        item.actual_cost = (item.actual_cost or Decimal("0")) + row.amount
        db.add(entry)
        created.append(entry)
    db.flush()
    return created, errors


def run_cost_import(db: Session, project_id: int, file_name: str, data: bytes) -> CostImportResult:
    if detect_kind(file_name) != "csv":
        raise StructuralError("Cost import only accepts .csv files")
    run = create_import_run(db, project_id, "costs", file_name, bytes_sha256(data))
    logger.info("cost_import_start", import_run_id=run.id, project_id=project_id, file_name=file_name)

    try:
        created, errors = _load_cost_rows(db, project_id, data)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.exception("cost_import_failed", import_run_id=run.id, error=str(e))
        _finish(db, run, 0, [RowError(str(e))])
        raise

    errors.sort(key=lambda e: e.row_num or 0)
    _finish(db, run, len(created), errors)
    logger.info("cost_import_finished", import_run_id=run.id, created=len(created), errors=len(errors))
    return CostImportResult(run=run, created=created, errors=errors)
