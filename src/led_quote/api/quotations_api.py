"""
Quotations API - FastAPI router for storing and reporting on quotations.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ..engine.errors import PricingError, UnknownProductError
from ..engine.models import DisplayRequest
from ..engine.pricing_engine import PricingEngine
from ..services.dashboard_service import DashboardService
from ..services.quotation_ids import QuotationIdExhaustedError
from ..services.quotation_service import (
    DegradedQuotationError, InvalidStatusError, QuotationNotFoundError,
    QuotationRecord, QuotationService,
)
from .schemas import QuotationCreate, QuotationResponse, StatusUpdate
from .state import get_engine, get_quotation_service

router = APIRouter(prefix="/api/quotations", tags=["quotations"])


def pricing_http_error(error: PricingError) -> HTTPException:
    """Map an engine error to an HTTP error."""
    status = 404 if isinstance(error, UnknownProductError) else 422
    return HTTPException(
        status_code=status,
        detail={"error": type(error).__name__, "field": error.field, "message": str(error)},
    )


def _response(record: QuotationRecord) -> QuotationResponse:
    return QuotationResponse(**record.to_dict())


# Endpoints

@router.post("", response_model=QuotationResponse, status_code=201)
async def create_quotation(
    data: QuotationCreate,
    engine: PricingEngine = Depends(get_engine),
    service: QuotationService = Depends(get_quotation_service),
):
    """Price a configuration and store the resulting quotation."""
    request = data.to_display_request()
    try:
        breakdown = engine.calculate(request)
    except PricingError as e:
        raise pricing_http_error(e)

    try:
        record = service.save(
            breakdown,
            request,
            sales_person=data.sales_person,
            customer=data.customer.model_dump(),
            message=data.message,
            allow_degraded=data.allow_degraded,
            discount=data.discount(),
        )
    except PricingError as e:
        raise pricing_http_error(e)
    except DegradedQuotationError as e:
        raise HTTPException(
            status_code=409,
            detail={"error": "DegradedQuotation", "unresolved_fields": list(e.unresolved_fields),
                    "message": str(e)},
        )
    except (QuotationIdExhaustedError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _response(record)


@router.get("", response_model=list[QuotationResponse])
async def list_quotations(
    status: Optional[str] = None,
    sales_person: Optional[str] = None,
    service: QuotationService = Depends(get_quotation_service),
):
    """List stored quotations, newest first."""
    return [_response(r) for r in service.list_quotations(status=status, sales_person=sales_person)]


@router.get("/dashboard")
async def dashboard(
    status: Optional[str] = None,
    service: QuotationService = Depends(get_quotation_service),
):
    """Totals and per-status / per-sales-person summaries of stored grand totals."""
    dashboard = DashboardService(service.list_quotations())
    stats = dashboard.stats()
    stats["filtered_total_value"] = dashboard.total_value(status=status)
    stats["by_sales_person"] = dashboard.summary_by_sales_person()
    return stats


@router.get("/verify")
async def verify_quotations(
    engine: PricingEngine = Depends(get_engine),
    service: QuotationService = Depends(get_quotation_service),
):
    """Recompute every stored quotation against the current catalog."""
    results = DashboardService(service.list_quotations()).verify_records(engine)
    return {
        "checked": len(results),
        "mismatches": [r for r in results if not r["is_valid"]],
    }


@router.get("/{quotation_id:path}", response_model=QuotationResponse)
async def get_quotation(quotation_id: str, service: QuotationService = Depends(get_quotation_service)):
    try:
        return _response(service.get(quotation_id))
    except QuotationNotFoundError:
        raise HTTPException(status_code=404, detail=f"Quotation '{quotation_id}' not found")


@router.patch("/{quotation_id:path}/status", response_model=QuotationResponse)
async def update_status(
    quotation_id: str,
    update: StatusUpdate,
    service: QuotationService = Depends(get_quotation_service),
):
    try:
        return _response(service.update_status(quotation_id, update.status))
    except QuotationNotFoundError:
        raise HTTPException(status_code=404, detail=f"Quotation '{quotation_id}' not found")
    except InvalidStatusError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{quotation_id:path}/recalculate", response_model=QuotationResponse)
async def recalculate(
    quotation_id: str,
    allow_degraded: bool = False,
    engine: PricingEngine = Depends(get_engine),
    service: QuotationService = Depends(get_quotation_service),
):
    """Re-price the stored request and replace the whole breakdown."""
    try:
        record = service.get(quotation_id)
    except QuotationNotFoundError:
        raise HTTPException(status_code=404, detail=f"Quotation '{quotation_id}' not found")

    request = DisplayRequest.from_dict(record.request)
    try:
        breakdown = engine.calculate(request)
        record = service.replace_breakdown(quotation_id, breakdown, request, allow_degraded=allow_degraded)
    except PricingError as e:
        raise pricing_http_error(e)
    except DegradedQuotationError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _response(record)


@router.delete("/{quotation_id:path}")
async def delete_quotation(quotation_id: str, service: QuotationService = Depends(get_quotation_service)):
    if not service.delete(quotation_id):
        raise HTTPException(status_code=404, detail=f"Quotation '{quotation_id}' not found")
    return {"success": True, "message": f"Quotation '{quotation_id}' deleted"}
