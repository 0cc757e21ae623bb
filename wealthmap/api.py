from typing import Any, Optional, Type, TypeVar

from fastapi import APIRouter, Body, FastAPI, Query, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from .errors import InvalidInputError
from .models.analysis import (
    ErrorResponse,
    MarketAnalysis,
    MarketRequest,
    OwnershipAnalysis,
    PortfolioRequest,
    PropertyMetrics,
    ValuationRequest,
    WealthAnalysis,
)
from .services.market import analyze_market
from .services.portfolio import analyze_owner_portfolio
from .services.report_service import ReportService
from .services.valuation import calculate_property_valuation
from .services.wealth_service import WealthService
from .utils.logging import get_logger

LOGGER = get_logger("api")

app = FastAPI(title="wealthmap")
router = APIRouter(prefix="/api")
wealth_service = WealthService()
report_service = ReportService()

RequestModel = TypeVar("RequestModel", bound=BaseModel)


def _parse(model: Type[RequestModel], payload: Any) -> RequestModel:
    if not isinstance(payload, dict):
        raise InvalidInputError(f"request body must be an object, got {type(payload).__name__}")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInputError(f"malformed {model.__name__}: {exc.errors(include_url=False)}") from exc


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    LOGGER.warning("invalid_input path=%s error=%s", request.url.path, exc)
    body = ErrorResponse(error=str(exc), code=exc.code)
    return JSONResponse(status_code=400, content=body.model_dump(by_alias=True, exclude_none=True))


@router.get("/health")
def health():
    return {"status": "ok"}


@router.post("/valuation", response_model=PropertyMetrics, response_model_exclude_none=True)
def valuation(payload: Any = Body(...)):
    req = _parse(ValuationRequest, payload)
    return calculate_property_valuation(req.property, req.comparables)


@router.post("/portfolio", response_model=OwnershipAnalysis)
def portfolio(payload: Any = Body(...)):
    req = _parse(PortfolioRequest, payload)
    return analyze_owner_portfolio(req.properties)


@router.post("/market", response_model=MarketAnalysis)
def market(payload: Any = Body(...)):
    req = _parse(MarketRequest, payload)
    return analyze_market(req.properties, req.location)


@router.post("/wealth-analysis/{owner_id}", response_model=WealthAnalysis)
def wealth_analysis(
    owner_id: str,
    response: Response,
    payload: Any = Body(None),
    property_id: Optional[str] = Query(None, alias="propertyId"),
):
    analysis = wealth_service.analyze_owner(payload if payload is not None else {}, owner_id=owner_id, property_id=property_id)
    response.headers["X-Processing-Time"] = f"{analysis.metadata.processing_time_ms}ms"
    response.headers["Cache-Control"] = "private, max-age=300"
    return analysis


@router.get("/reports/fields")
def report_fields():
    fields = report_service.available_fields()
    return {"fields": [f.model_dump(by_alias=True) for f in fields]}


@router.post("/reports")
def generate_report(payload: Any = Body(...)):
    report = report_service.generate(payload)
    return Response(
        content=report.content,
        media_type=report.content_type,
        headers={"Content-Disposition": f'attachment; filename="{report.filename}"'},
    )


app.include_router(router)
