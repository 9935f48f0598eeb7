from __future__ import annotations

from decimal import Decimal, InvalidOperation

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import FileResponse

from guardops.application import get_payroll_service
from guardops.core.exports import ensure_export_dir
from guardops.core.schema import AttendanceSummary, SalaryConfiguration
from guardops.core.validation import DomainError
from guardops.routes.errors import http_error

router = APIRouter(prefix="/payroll", tags=["payroll"])


def _require_int(payload: dict, key: str) -> int:
    value = payload.get(key)
    if value is None:
        raise HTTPException(status_code=400, detail=f"{key} is required")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=f"{key} must be an integer") from exc


def _optional_decimal(payload: dict, key: str) -> Decimal | None:
    value = payload.get(key)
    if value is None:
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise HTTPException(status_code=400, detail=f"{key} must be a number") from exc


@router.post("/configs")
async def add_salary_config(config: SalaryConfiguration) -> dict:
    service = get_payroll_service()
    try:
        service.add_salary_config(config)
    except DomainError as exc:
        raise http_error(exc) from exc
    return {"guard_id": config.guard_id, "effective_from": config.effective_from.isoformat()}


@router.get("/configs")
async def list_salary_configs(guard_id: str | None = Query(default=None)) -> dict:
    service = get_payroll_service()
    return {"items": [config.model_dump() for config in service.list_salary_configs(guard_id)]}


@router.post("/attendance")
async def add_attendance_summary(summary: AttendanceSummary) -> dict:
    service = get_payroll_service()
    warnings = service.add_attendance_summary(summary)
    return {"guard_id": summary.guard_id, "period_month": summary.period_month, "warnings": warnings}


@router.get("/attendance")
async def list_attendance(period: str | None = Query(default=None)) -> dict:
    service = get_payroll_service()
    return {"items": [summary.model_dump() for summary in service.list_attendance(period)]}


@router.post("/calculate")
async def calculate_payroll(payload: dict) -> dict:
    guard_id = payload.get("guard_id")
    if not guard_id:
        raise HTTPException(status_code=400, detail="guard_id is required")
    month = _require_int(payload, "month")
    year = _require_int(payload, "year")

    service = get_payroll_service()
    try:
        record = service.calculate(
            guard_id,
            month,
            year,
            advance_deductions=_optional_decimal(payload, "advance_deductions"),
            other_deductions=_optional_decimal(payload, "other_deductions"),
        )
    except DomainError as exc:
        raise http_error(exc) from exc
    return record.model_dump()


@router.post("/process")
async def process_payroll(payload: dict) -> dict:
    month = _require_int(payload, "month")
    year = _require_int(payload, "year")
    selected = payload.get("selected") or None
    if selected is not None and (
        not isinstance(selected, list) or not all(isinstance(guard_id, str) and guard_id for guard_id in selected)
    ):
        raise HTTPException(status_code=400, detail="selected must be a list of guard ids")

    service = get_payroll_service()
    try:
        records = service.process_period(month, year, selected)
    except DomainError as exc:
        raise http_error(exc) from exc
    return {"items": [record.model_dump() for record in records]}


@router.post("/records/{guard_id}/{period}/paid")
async def mark_paid(guard_id: str, period: str) -> dict:
    service = get_payroll_service()
    try:
        record = service.mark_paid(guard_id, period)
    except DomainError as exc:
        raise http_error(exc) from exc
    return record.model_dump()


@router.post("/records/{guard_id}/{period}/cancel")
async def cancel_record(guard_id: str, period: str, payload: dict | None = None) -> dict:
    notes = (payload or {}).get("notes")
    service = get_payroll_service()
    try:
        record = service.cancel(guard_id, period, notes=notes)
    except DomainError as exc:
        raise http_error(exc) from exc
    return record.model_dump()


@router.get("/records")
async def list_records(
    period: str | None = Query(default=None),
    guard_id: str | None = Query(default=None),
    status: str | None = Query(default=None),
) -> dict:
    service = get_payroll_service()
    try:
        records = service.list_records(period, guard_id=guard_id, status=status)
    except DomainError as exc:
        raise http_error(exc) from exc
    return {"period": period, "items": [record.model_dump() for record in records]}


@router.get("/stats")
async def get_stats(
    period: str | None = Query(default=None),
    guard_id: str | None = Query(default=None),
) -> dict:
    service = get_payroll_service()
    try:
        stats = service.get_stats(period, guard_id=guard_id)
    except DomainError as exc:
        raise http_error(exc) from exc
    return stats.model_dump()


@router.get("/export")
async def export_payroll(
    period: str | None = Query(default=None),
    fmt: str = Query(default="csv", alias="format"),
) -> FileResponse:
    if fmt not in {"csv", "xlsx"}:
        raise HTTPException(status_code=400, detail="format must be csv or xlsx")
    service = get_payroll_service()
    try:
        target = ensure_export_dir(period) / f"payroll_register.{fmt}"
        path = service.export(target, fmt, period)
    except DomainError as exc:
        raise http_error(exc) from exc
    return FileResponse(path, filename=path.name)
