import logging
from datetime import datetime, timezone
from urllib.parse import urlparse

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .config import get_settings
from .export import ExportError, export_filename, to_csv, to_json
from .extractor import extract
from .models import (
    ExportRequest,
    ScrapeRequest,
    ScrapeResponse,
    ScreenshotRequest,
    ScreenshotResponse,
    TableRequest,
    TableResponse,
)
from .retry import AttemptOutcome, RetryOrchestrator
from .screenshot import capture
from .stats import Stopwatch, empty_selectors, extraction_stats, table_stats, timing_stats
from .table import extract_table

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="WebUnlock API", version="1.0.0")

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def is_valid_url(url: str) -> bool:
    try:
        result = urlparse(url)
        return result.scheme in ("http", "https") and bool(result.netloc)
    except ValueError:
        return False


def bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "error": message})


def operation_failed(outcome: AttemptOutcome, stopwatch: Stopwatch) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": outcome.error,
            "executionTime": stopwatch.elapsed_ms(),
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid request: {location}: {first.get('msg')}" if location else f"Invalid request: {first.get('msg')}"
    else:
        message = "Invalid request"
    return bad_request(message)


@app.get("/")
def read_root():
    return {"message": "WebUnlock API", "version": "1.0.0"}


@app.get("/health")
def health_check():
    return {
        "status": "ok",
        "service": "WebUnlock",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.post("/scrape", response_model=ScrapeResponse)
async def scrape_selectors(request: ScrapeRequest):
    """
    Extract text and attributes for every element matched by each selector
    """
    stopwatch = Stopwatch()
    selectors = request.selector_list()
    if not request.url or not selectors:
        return bad_request('Missing parameters. Send "url" and "selector" or "selectors".')
    if not is_valid_url(request.url):
        return bad_request(f"Invalid URL: {request.url}")

    outcome = await RetryOrchestrator().run(
        lambda session: extract(session, request.url, selectors, request.options),
        request.options,
        label=f"scrape {request.url}",
    )
    if not outcome.success:
        return operation_failed(outcome, stopwatch)

    data = outcome.value
    missing = empty_selectors(data)
    if missing:
        logger.info(f"Selectors without matches on {request.url}: {missing}")

    return ScrapeResponse(
        url=request.url,
        selectors=list(data),
        data=data,
        stats=extraction_stats(data, stopwatch.elapsed_ms()),
    )


@app.post("/scrape/table", response_model=TableResponse)
async def scrape_table(request: TableRequest):
    """
    Convert an HTML table into a list of records keyed by column header
    """
    stopwatch = Stopwatch()
    table_selector = (request.table_selector or "").strip()
    if not request.url or not table_selector:
        return bad_request('Missing parameters. Send "url" and "tableSelector".')
    if not is_valid_url(request.url):
        return bad_request(f"Invalid URL: {request.url}")

    outcome = await RetryOrchestrator().run(
        lambda session: extract_table(session, request.url, table_selector, request.options),
        request.options,
        label=f"table {request.url}",
    )
    if not outcome.success:
        return operation_failed(outcome, stopwatch)

    rows = outcome.value
    return TableResponse(
        url=request.url,
        table_selector=table_selector,
        data=rows,
        stats=table_stats(rows, stopwatch.elapsed_ms()),
    )


@app.post("/screenshot", response_model=ScreenshotResponse)
async def take_screenshot(request: ScreenshotRequest):
    """
    Capture a PNG screenshot of the page, returned as a data URI
    """
    stopwatch = Stopwatch()
    if not request.url:
        return bad_request('Missing parameter. Send "url".')
    if not is_valid_url(request.url):
        return bad_request(f"Invalid URL: {request.url}")

    outcome = await RetryOrchestrator().run(
        lambda session: capture(session, request.url, request.options),
        request.options,
        label=f"screenshot {request.url}",
    )
    if not outcome.success:
        return operation_failed(outcome, stopwatch)

    return ScreenshotResponse(
        url=request.url,
        screenshot=outcome.value.data_uri,
        stats=timing_stats(stopwatch.elapsed_ms()),
    )


@app.post("/export/csv")
def export_csv(request: ExportRequest):
    try:
        content = to_csv(request.data)
    except ExportError as e:
        return bad_request(str(e))

    filename = export_filename(request.filename, "csv")
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.post("/export/json")
def export_json(request: ExportRequest):
    try:
        content = to_json(request.data)
    except ExportError as e:
        return bad_request(str(e))

    filename = export_filename(request.filename, "json")
    return Response(
        content=content,
        media_type="application/json; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def run():
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
