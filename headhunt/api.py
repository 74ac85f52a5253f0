# headhunt/api.py
from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from . import __version__
from .config import load_settings
from .errors import FetchError, InvalidURLError
from .pipeline import analyze_url

app = FastAPI(title="HeadHunt SEO Metadata API", version=__version__)
logger = logging.getLogger("headhunt")


class AnalyzeRequest(BaseModel):
    url: str


@app.post("/api/analyze", response_class=JSONResponse)
async def analyze_api(payload: AnalyzeRequest):
    settings = load_settings()
    # Fetch + extraction are blocking; keep them off the event loop
    try:
        report = await run_in_threadpool(analyze_url, payload.url, settings)
    except InvalidURLError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FetchError as e:
        logger.warning("Fetch failed for %s: %s", payload.url, e.reason)
        raise HTTPException(status_code=502, detail=str(e))
    return report.to_dict()


@app.get("/healthz", response_class=JSONResponse)
async def healthz():
    return {"status": "ok"}
