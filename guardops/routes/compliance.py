from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from guardops.application import get_compliance_service
from guardops.core.schema import ComplianceCategory
from guardops.core.validation import DomainError
from guardops.routes.errors import http_error

router = APIRouter(prefix="/compliance", tags=["compliance"])

DEDUCTION_FIELDS = ("expiring_licenses", "expiring_trainings", "expiring_agreements", "pending_wages")


@router.put("/categories")
async def replace_categories(categories: list[ComplianceCategory]) -> dict:
    service = get_compliance_service()
    service.set_categories(categories)
    return {"items": [category.model_dump() for category in service.list_categories()]}


@router.get("/categories")
async def list_categories() -> dict:
    service = get_compliance_service()
    return {"items": [category.model_dump() for category in service.list_categories()]}


@router.get("/score")
async def get_score(limit: int | None = Query(default=None, ge=0)) -> dict:
    service = get_compliance_service()
    try:
        result = service.score(limit=limit)
    except DomainError as exc:
        raise http_error(exc) from exc
    return result.model_dump()


@router.post("/history")
async def record_snapshot(payload: dict | None = None) -> dict:
    on_date = (payload or {}).get("date")
    service = get_compliance_service()
    try:
        entry = service.record_snapshot(on_date)
    except DomainError as exc:
        raise http_error(exc) from exc
    return entry.model_dump()


@router.get("/history")
async def list_history() -> dict:
    service = get_compliance_service()
    return {"items": [entry.model_dump() for entry in service.list_history()]}


@router.post("/deduction-score")
async def get_deduction_score(payload: dict) -> dict:
    counts: dict[str, int] = {}
    for field in DEDUCTION_FIELDS:
        try:
            counts[field] = int(payload.get(field) or 0)
        except (TypeError, ValueError) as exc:
            raise HTTPException(status_code=400, detail=f"{field} must be an integer") from exc
        if counts[field] < 0:
            raise HTTPException(status_code=400, detail=f"{field} cannot be negative")
    service = get_compliance_service()
    return {"score": service.deduction_score(**counts), **counts}
