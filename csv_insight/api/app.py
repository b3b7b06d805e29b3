"""FastAPI application for CSV Insight.

This module provides the REST API endpoints for the CSV Insight application,
including CSV upload, column summaries, and chart generation.
"""

from __future__ import annotations

import html
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, File, HTTPException, Query, UploadFile, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from csv_insight import __version__
from csv_insight.analysis.statistics import analysis_payload, summarize_dataset
from csv_insight.api.sessions import ReportSession, get_session_store
from csv_insight.config import get_settings
from csv_insight.core.dataset import Dataset
from csv_insight.core.errors import ColumnNotFoundError, EmptySessionError, PayloadError
from csv_insight.visualization.cards import (
    SortOrder,
    build_cards,
    render_cards_html,
    render_preview_html,
)
from csv_insight.visualization.charts import ChartKind, PlotResult
from csv_insight.visualization.histogram import dataset_histogram
from csv_insight.visualization.options import HistogramOptions, ScatterOptions
from csv_insight.visualization.scatter import dataset_scatter

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()
    logger.info(f"Starting CSV Insight API ({settings.environment})")

    yield

    logger.info("Shutting down CSV Insight API")


# Create FastAPI app
app = FastAPI(
    title="CSV Insight API",
    description="Column statistics and charts for uploaded CSV files",
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class CamelModel(BaseModel):
    """Base model serialised with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UploadResponse(CamelModel):
    """Response from the upload endpoint."""

    session_id: str
    file_name: str
    headers: list[str]
    data: list[dict[str, Any]]
    analysis: dict[str, dict[str, Any]]


class SessionCreateRequest(CamelModel):
    """Request body for storing an already analysed payload."""

    file_name: str = Field(..., description="Original file name")
    payload: dict[str, Any] = Field(..., description="Inbound dataset payload")


class SessionCreateResponse(CamelModel):
    """Response with the new session id."""

    session_id: str


class AnalysisResponse(CamelModel):
    """Summary cards for a session."""

    file_name: str
    sort: SortOrder
    numeric_columns: list[str]
    cards: list[dict[str, Any]]
    analysis: dict[str, dict[str, Any]]


class HistogramRequest(BaseModel):
    """Request body for a histogram redraw."""

    column: str = Field(..., description="Numeric column to bin")
    options: HistogramOptions = Field(default_factory=HistogramOptions)


class ScatterRequest(BaseModel):
    """Request body for a scatter redraw."""

    x_column: str = Field(..., description="X-axis column")
    y_column: str = Field(..., description="Y-axis column")
    options: ScatterOptions = Field(default_factory=ScatterOptions)


class PlotResponse(BaseModel):
    """Response with plot data."""

    success: bool
    unchanged: bool = False
    plot_json: str | None = None
    chart_data: dict[str, Any] | None = None
    data_summary: dict[str, Any] | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    sessions: int


INDEX_HTML = """<!DOCTYPE html>
<html>
<head><title>CSV Insight</title></head>
<body>
<h1>CSV Insight</h1>
<form id="uploadForm" action="/upload" method="post" enctype="multipart/form-data">
<input type="file" id="file" name="file" accept=".csv">
<button type="submit">Analyze</button>
</form>
</body>
</html>
"""


def _require_session(session_id: str) -> ReportSession:
    session = get_session_store().get(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown session: {session_id}",
        )
    return session


def _load_or_404(session: ReportSession) -> tuple[Dataset, str]:
    try:
        return session.load()
    except EmptySessionError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )


def _unchanged(session: ReportSession, kind: ChartKind, error: str) -> PlotResponse:
    """Response for an aborted redraw; the live chart is left as it was."""
    current = session.renderer.current(kind)
    return PlotResponse(
        success=False,
        unchanged=True,
        plot_json=current.result.to_json() if current is not None else None,
        error=error,
    )


def _plot_response(result: PlotResult, chart_data: dict[str, Any]) -> PlotResponse:
    return PlotResponse(
        success=True,
        plot_json=result.to_json(),
        chart_data=chart_data,
        data_summary=result.data_summary,
    )


# Endpoints
@app.get("/", response_class=HTMLResponse)
async def index() -> str:
    """Upload entry page."""
    return INDEX_HTML


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check API health."""
    return HealthResponse(status="healthy", sessions=len(get_session_store()))


@app.post("/upload", response_model=UploadResponse)
async def upload_file(file: UploadFile = File(...)) -> UploadResponse:
    """Parse and analyse an uploaded CSV file.

    Nothing is stored unless the whole file parses.
    """
    settings = get_settings()
    file_name = file.filename or ""

    try:
        if not file_name.lower().endswith(".csv"):
            raise PayloadError("Only CSV files are supported")

        content = await file.read()
        if len(content) > settings.max_upload_bytes:
            raise PayloadError(
                f"File exceeds the {settings.max_upload_bytes} byte upload limit"
            )

        dataset = Dataset.from_csv(content)
        if dataset.is_empty:
            raise PayloadError("CSV file has no data rows")

        summaries = summarize_dataset(dataset)

    except PayloadError as e:
        logger.warning(f"Rejected upload {file_name!r}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Error processing file: {e}",
        )
    except Exception as e:
        logger.exception("Upload processing failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error processing file: {e}",
        )

    session = get_session_store().create(dataset, file_name)
    payload = dataset.to_payload()

    return UploadResponse(
        session_id=session.session_id,
        file_name=file_name,
        headers=payload["headers"],
        data=payload["data"],
        analysis=analysis_payload(summaries),
    )


@app.post("/sessions", response_model=SessionCreateResponse)
async def create_session(request: SessionCreateRequest) -> SessionCreateResponse:
    """Store an inbound payload (either shape) for a later report page."""
    try:
        dataset = Dataset.from_payload(request.payload)
    except PayloadError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    if dataset.is_empty:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Payload contains no data",
        )

    session = get_session_store().create(dataset, request.file_name)
    return SessionCreateResponse(session_id=session.session_id)


@app.get("/sessions/{session_id}/analysis", response_model=AnalysisResponse)
async def get_analysis(
    session_id: str,
    sort: SortOrder = Query(default=SortOrder.DEFAULT),
) -> AnalysisResponse:
    """Get the summary cards for a session in the requested order."""
    dataset, file_name = _load_or_404(_require_session(session_id))
    summaries = summarize_dataset(dataset)

    return AnalysisResponse(
        file_name=file_name,
        sort=sort,
        numeric_columns=list(dataset.numeric_columns),
        cards=[card.to_dict() for card in build_cards(summaries, dataset.headers, sort)],
        analysis=analysis_payload(summaries),
    )


@app.post("/sessions/{session_id}/histogram", response_model=PlotResponse)
async def redraw_histogram(session_id: str, request: HistogramRequest) -> PlotResponse:
    """Redraw the session's histogram for a column."""
    session = _require_session(session_id)
    dataset, _ = _load_or_404(session)

    try:
        data = dataset_histogram(dataset, request.column, request.options)
    except ColumnNotFoundError as e:
        logger.warning(f"Histogram redraw aborted: {e}")
        return _unchanged(session, ChartKind.HISTOGRAM, str(e))

    result = session.renderer.render(ChartKind.HISTOGRAM, data, request.options)
    return _plot_response(result, data.to_dict())


@app.post("/sessions/{session_id}/scatter", response_model=PlotResponse)
async def redraw_scatter(session_id: str, request: ScatterRequest) -> PlotResponse:
    """Redraw the session's scatter plot for a pair of columns."""
    session = _require_session(session_id)
    dataset, _ = _load_or_404(session)

    try:
        data = dataset_scatter(dataset, request.x_column, request.y_column, request.options)
    except ColumnNotFoundError as e:
        logger.warning(f"Scatter redraw aborted: {e}")
        return _unchanged(session, ChartKind.SCATTER, str(e))

    result = session.renderer.render(ChartKind.SCATTER, data, request.options)
    return _plot_response(result, data.to_dict())


@app.get("/sessions/{session_id}/report", response_class=HTMLResponse, response_model=None)
async def report_page(
    session_id: str,
    sort: SortOrder = Query(default=SortOrder.DEFAULT),
) -> HTMLResponse | RedirectResponse:
    """Full analysis page; redirects to the upload page when nothing is stored."""
    session = get_session_store().get(session_id)
    try:
        if session is None:
            raise EmptySessionError(f"Unknown session: {session_id}")
        dataset, file_name = session.load()
    except EmptySessionError as e:
        logger.info(f"Redirecting to upload page: {e}")
        return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)

    summaries = summarize_dataset(dataset)
    sections = [
        f"<h1>{html.escape(file_name)}</h1>",
        render_cards_html(build_cards(summaries, dataset.headers, sort)),
        render_preview_html(dataset),
    ]

    numeric = dataset.numeric_columns
    if numeric:
        hist = session.renderer.render(
            ChartKind.HISTOGRAM, dataset_histogram(dataset, numeric[0])
        )
        y_column = numeric[1] if len(numeric) > 1 else numeric[0]
        scatter = session.renderer.render(
            ChartKind.SCATTER, dataset_scatter(dataset, numeric[0], y_column)
        )
        sections += [hist.to_html(), scatter.to_html(include_plotlyjs=False)]

    body = "\n".join(sections)
    return HTMLResponse(
        f"<!DOCTYPE html><html><head><title>{html.escape(file_name)}</title></head>"
        f"<body>{body}</body></html>"
    )


@app.delete("/sessions/{session_id}")
async def logout(session_id: str) -> dict[str, Any]:
    """Clear a session's stored dataset and charts."""
    return {"cleared": get_session_store().discard(session_id)}
