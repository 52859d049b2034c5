"""Tax pack export endpoints."""

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from taxpack.api.deps import (
    get_date_range_service,
    get_download_sink,
    get_exporter,
    get_portfolio_service,
)
from taxpack.api.schemas import (
    DateRangeListResponse,
    DateRangeResponse,
    ExportRequest,
    ExportResultResponse,
)
from taxpack.domain.views import ExportResult
from taxpack.export import MemoryDownloadSink, TaxPackExporter
from taxpack.services import DateRangeService, PortfolioService

router = APIRouter(prefix="/exports", tags=["exports"])


def _header_safe(value: str) -> str:
    """Headers are latin-1; replace anything outside it."""
    return value.encode("latin-1", "replace").decode("latin-1")


def _to_response(result: ExportResult, sink: MemoryDownloadSink) -> Response:
    """Return the archive as a download, or the result body when there is none."""
    if not result.success:
        body = ExportResultResponse.model_validate(result)
        return JSONResponse(status_code=400, content=body.model_dump())

    filename, payload = sink.last
    return Response(
        content=payload,
        media_type="application/zip",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "X-Export-Message": _header_safe(result.message),
        },
    )


@router.get("/date-ranges", response_model=DateRangeListResponse)
def list_date_ranges(service: DateRangeService = Depends(get_date_range_service)):
    """List preset export periods and the last one used."""
    return DateRangeListResponse(
        options=[DateRangeResponse.model_validate(o) for o in service.list_options()],
        last_selection=service.last_selection(),
    )


@router.post("/properties/{property_id}")
def export_property(
    property_id: str,
    request: ExportRequest,
    portfolio: PortfolioService = Depends(get_portfolio_service),
    ranges: DateRangeService = Depends(get_date_range_service),
    exporter: TaxPackExporter = Depends(get_exporter),
    sink: MemoryDownloadSink = Depends(get_download_sink),
):
    """Download the tax pack for one property."""
    date_range = ranges.resolve(request.selection, request.custom_start, request.custom_end)
    properties, transactions = portfolio.load_export_inputs(property_id)
    result = exporter.export_property(properties[0], transactions, date_range)
    return _to_response(result, sink)


@router.post("/portfolio")
def export_portfolio(
    request: ExportRequest,
    portfolio: PortfolioService = Depends(get_portfolio_service),
    ranges: DateRangeService = Depends(get_date_range_service),
    exporter: TaxPackExporter = Depends(get_exporter),
    sink: MemoryDownloadSink = Depends(get_download_sink),
):
    """Download one tax pack covering every property."""
    date_range = ranges.resolve(request.selection, request.custom_start, request.custom_end)
    properties, transactions = portfolio.load_export_inputs()
    result = exporter.export_portfolio(properties, transactions, date_range)
    return _to_response(result, sink)
