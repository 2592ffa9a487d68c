import logging
from pathlib import Path

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from .aggregates import get_category_histogram, get_price_histogram, get_statistics
from .db import init_db
from .errors import SalesboardError
from .logic import MONTH_NAMES, parse_month, parse_positive_int
from .query import build_filter
from .seed import initialize
from .service import DEFAULT_PER_PAGE, get_combined, get_page
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

api = APIRouter(prefix="/api")
dashboard = APIRouter()

MONTH_OPTIONS = [
    (f"{number:02d}", name.title()) for number, name in enumerate(MONTH_NAMES, start=1)
]
DEFAULT_DASHBOARD_MONTH = "03"


def _settings(request: Request) -> Settings:
    return request.app.state.settings


def _paging(page: str | None, per_page: str | None) -> tuple[int, int]:
    return (
        parse_positive_int(page, name="page", default=1),
        parse_positive_int(per_page, name="perPage", default=DEFAULT_PER_PAGE),
    )


@api.get("/transactions/initialize")
async def initialize_route(settings: Settings = Depends(_settings)):
    await initialize(
        settings.db_path, url=settings.seed_url, timeout=settings.http_timeout
    )
    return {"message": "Database initialized successfully"}


@api.get("/transactions")
def transactions_route(
    month: str | None = None,
    search: str | None = None,
    page: str | None = None,
    per_page: str | None = Query(default=None, alias="perPage"),
    settings: Settings = Depends(_settings),
):
    try:
        flt = build_filter(month, search)
        resolved_page, resolved_per_page = _paging(page, per_page)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return get_page(
        settings.db_path, flt, page=resolved_page, per_page=resolved_per_page
    )


def _month_filter(month: str | None):
    try:
        return build_filter(month)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@api.get("/statistics")
def statistics_route(month: str | None = None, settings: Settings = Depends(_settings)):
    return get_statistics(settings.db_path, _month_filter(month))


@api.get("/bar-chart")
def bar_chart_route(month: str | None = None, settings: Settings = Depends(_settings)):
    return get_price_histogram(settings.db_path, _month_filter(month))


@api.get("/pie-chart")
def pie_chart_route(month: str | None = None, settings: Settings = Depends(_settings)):
    return get_category_histogram(settings.db_path, _month_filter(month))


async def _combined_view(
    settings: Settings,
    month: str | None,
    search: str | None,
    page: str | None,
    per_page: str | None,
) -> dict:
    try:
        resolved_page, resolved_per_page = _paging(page, per_page)
        build_filter(month, search)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return await get_combined(
        settings.db_path,
        month=month,
        search=search,
        page=resolved_page,
        per_page=resolved_per_page,
        timeout=settings.query_timeout,
    )


@api.get("/combined")
async def combined_route(
    month: str | None = None,
    search: str | None = None,
    page: str | None = None,
    per_page: str | None = Query(default=None, alias="perPage"),
    settings: Settings = Depends(_settings),
):
    return await _combined_view(settings, month, search, page, per_page)


def _build_index_context(view: dict, month: str | None, search: str | None) -> dict:
    month_number = parse_month(month)
    page_view = view["transactions"]
    return {
        "transactions": page_view["transactions"],
        "page": page_view["page"],
        "total_pages": max(page_view["totalPages"], 1),
        "total": page_view["total"],
        "statistics": view["statistics"],
        "bar_chart": view["barChart"],
        "pie_chart": view["pieChart"],
        "bar_max": max((item["count"] for item in view["barChart"]), default=0),
        "month": f"{month_number:02d}" if month_number else "",
        "search": search or "",
        "months": MONTH_OPTIONS,
    }


def _render_partial(request: Request, context: dict) -> HTMLResponse:
    summary_html = templates.get_template("_summary.html").render(
        request=request, **context
    )
    table_html = templates.get_template("_transactions_table.html").render(
        request=request, **context
    )
    charts_html = templates.get_template("_charts.html").render(
        request=request, **context
    )
    return HTMLResponse(table_html + summary_html + charts_html)


@dashboard.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    month: str = DEFAULT_DASHBOARD_MONTH,
    search: str | None = None,
    page: str | None = None,
    settings: Settings = Depends(_settings),
):
    view = await _combined_view(settings, month, search, page, None)
    context = _build_index_context(view, month, search)
    if request.headers.get("HX-Request") == "true":
        return _render_partial(request, context)
    return templates.TemplateResponse(request, "index.html", context)


async def _handle_salesboard_error(request: Request, exc: SalesboardError):
    logger.error(
        "%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc
    )
    return JSONResponse(status_code=500, content={"error": str(exc)})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    init_db(settings)

    app = FastAPI(title="salesboard")
    app.state.settings = settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(SalesboardError, _handle_salesboard_error)
    app.include_router(api)
    app.include_router(dashboard)
    return app


app = create_app()
