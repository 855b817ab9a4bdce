import logging
from typing import Any, Dict

from fastapi import FastAPI, UploadFile, File, HTTPException
from fastapi.responses import JSONResponse

from sysmon_events.config import load_settings
from sysmon_events.errors import ParseError
from sysmon_events.sysmon.event_id import event_catalog
from sysmon_events.sysmon.parse import parse_sysmon_event

settings = load_settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Sysmon Event XML Parser",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)


async def _read_upload(file: UploadFile) -> bytes:
    content = await file.read()
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large (max {settings.max_upload_bytes} bytes).",
        )
    if not content.strip():
        raise HTTPException(status_code=400, detail="Empty upload.")
    return content


def _parse_error_detail(exc: ParseError) -> Dict[str, Any]:
    detail: Dict[str, Any] = {"error": type(exc).__name__, "detail": str(exc)}
    name = getattr(exc, "name", None)
    if name:
        detail["name"] = name
    return detail


@app.get("/health")
async def health():
    return {"ok": True}


@app.get("/event-ids")
async def event_ids():
    return JSONResponse(event_catalog())


@app.post("/parse/sysmon")
async def parse_sysmon(file: UploadFile = File(...)):
    content = await _read_upload(file)
    try:
        event = parse_sysmon_event(content)
    except ParseError as exc:
        logger.info("Rejected %s: %s", file.filename, type(exc).__name__)
        raise HTTPException(status_code=400, detail=_parse_error_detail(exc)) from exc
    logger.debug("Parsed %s as event %s", file.filename, event.event_id)
    return JSONResponse(event.to_dict())
