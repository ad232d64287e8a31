"""
Jataka Birth Chart API — FastAPI Backend
========================================
Endpoints:
  POST /api/chart                         — Birth chart (planets, houses, lunar calendar,
                                            divisional charts, dasha)
  POST /api/chart/divisional/{division}   — One divisional chart (D1, D9, D10, D12, D30, D60)
  POST /api/chart/dasha                   — Vimshottari timeline, optional active period
  POST /api/pdf                           — PDF report
  GET  /api/health                        — Health check
"""

import io
import re
from datetime import datetime
from typing import Optional
from urllib.parse import quote

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from jataka_engine import BirthInput, acompute_birth_chart
from jataka_engine.config import get_settings
from jataka_engine.core.constants import AyanamsaSystem, HouseSystem
from jataka_engine.core.divisional_charts import SUPPORTED_DIVISIONS, Division
from jataka_engine.core.ephemeris import get_provider
from jataka_engine.errors import (ChartError, EphemerisUnavailable, InvalidNakshatra,
                                  UnsupportedDivision)
from jataka_engine.log import setup_logging
from jataka_engine.tools.birth_chart import dasha_to_dict, divisional_chart_to_dict
from pdf_report import generate_pdf_report

settings = get_settings()
setup_logging(settings.log_level, settings.log_json)
logger = structlog.get_logger(__name__)

provider = get_provider(settings.ephemeris_backend, settings.ephe_path)

app = FastAPI(
    title="Jataka Birth Chart API",
    version="1.0.0",
    description="Sidereal birth charts: planets, houses, lunar calendar, divisional charts, Vimshottari dasha",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request Models ─────────────────────────────────────────────

class BirthData(BaseModel):
    year:         int   = Field(..., ge=1800, le=2100)
    month:        int   = Field(..., ge=1,    le=12)
    day:          int   = Field(..., ge=1,    le=31)
    hour:         int   = Field(12,  ge=0,    le=23)
    minute:       int   = Field(0,   ge=0,    le=59)
    second:       int   = Field(0,   ge=0,    le=59)
    utc_offset:   Optional[float] = Field(None, ge=-14, le=14)
    timezone:     Optional[str]   = Field(None, description="IANA zone, e.g. Asia/Kolkata")
    latitude:     float = Field(..., ge=-90,  le=90)
    longitude:    float = Field(..., ge=-180, le=180)
    house_system: HouseSystem    = settings.house_system
    ayanamsa:     AyanamsaSystem = settings.ayanamsa

    def to_birth_input(self) -> BirthInput:
        return BirthInput(**self.model_dump(include=set(BirthData.model_fields)))


class DashaRequest(BirthData):
    on: Optional[datetime] = Field(None, description="Moment for the active period lookup")


class PDFRequest(BaseModel):
    birth: BirthData
    name:  Optional[str] = "Native"


# ── Utilities ──────────────────────────────────────────────────

def _http_error(e: ChartError) -> HTTPException:
    if isinstance(e, EphemerisUnavailable):
        return HTTPException(status_code=503, detail=str(e))
    if isinstance(e, (UnsupportedDivision, InvalidNakshatra)):
        return HTTPException(status_code=422, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


def _attachment(filename: str) -> str:
    """Content-Disposition value safe for any name (RFC 6266 / RFC 5987)."""
    fallback = re.sub(r"[^A-Za-z0-9._-]", "_", filename)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


async def _chart(data: BirthData):
    try:
        return await acompute_birth_chart(data.to_birth_input(), provider, settings)
    except ChartError as e:
        logger.info("api.rejected", error=type(e).__name__, detail=str(e))
        raise _http_error(e) from e


# ── Endpoints ──────────────────────────────────────────────────

@app.get("/api/health")
def health():
    return {
        "status": "ok",
        "service": "Jataka Birth Chart API",
        "version": "1.0.0",
        "ephemeris": settings.ephemeris_backend,
        "divisions": [str(d) for d in SUPPORTED_DIVISIONS],
        "endpoints": [
            "POST /api/chart",
            "POST /api/chart/divisional/{division}",
            "POST /api/chart/dasha",
            "POST /api/pdf",
        ],
    }


@app.post("/api/chart")
async def chart_endpoint(data: BirthData):
    chart = await _chart(data)
    return {"success": True, "chart": chart.to_dict()}


@app.post("/api/chart/divisional/{division}")
async def divisional_endpoint(division: str, data: BirthData):
    try:
        parsed = Division.parse(division)
    except UnsupportedDivision as e:
        raise _http_error(e) from e
    chart = await _chart(data)
    return {"success": True, "divisional_chart": divisional_chart_to_dict(chart.divisional_chart(parsed))}


@app.post("/api/chart/dasha")
async def dasha_endpoint(data: DashaRequest):
    chart = await _chart(data)
    return {"success": True, "dasha": dasha_to_dict(chart.dasha, data.on)}


@app.post("/api/pdf")
async def pdf_endpoint(data: PDFRequest):
    chart = await _chart(data.birth)
    pdf_bytes = generate_pdf_report(chart.to_dict(), data.name)
    return StreamingResponse(
        io.BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={
            "Content-Disposition": _attachment(f"birth_chart_{data.name}.pdf")
        },
    )
