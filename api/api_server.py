"""
api_server.py - FastAPI Backend for FTL Calculation
===================================================

RESTful API exposing duty cycle FTL calculation to the roster frontend.

Endpoints:
- POST /api/ftl/calculate - Flight list in, flights with FTL data out
- POST /api/ftl/upload - CSV roster upload, same response
- POST /api/ftl/limit - Single limit / latest arrival lookup

Usage:
    uvicorn api.api_server:app --reload --host 0.0.0.0 --port 8000
"""

from fastapi import FastAPI, UploadFile, File, HTTPException, Form
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from datetime import datetime
from pathlib import Path
import tempfile
import logging
import os

from core import (
    CollectingReporter,
    ConfigurationUnavailable,
    FTLLimitResolver,
    LatestArrivalCalculator,
    calculate_ftl_for_flights,
)
from core.timestamps import clock_to_minutes
from models.data_models import Flight, FtlConfiguration, FtlSettings
from parsers.config_loader import load_ftl_configuration
from parsers.flight_list_parser import FlightListParser

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent / 'data'

# ============================================================================
# FASTAPI APP INITIALIZATION
# ============================================================================

app = FastAPI(
    title="FTL Calculation API",
    description="Duty cycle FTL limits and latest arrival times for parsed rosters",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8080",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Loaded once per process, on first use
_configuration: Optional[FtlConfiguration] = None


def get_configuration() -> FtlConfiguration:
    """Load the FTL tables from FTL_CONFIG_DIR (or data/) on first call"""
    global _configuration
    if _configuration is None:
        config_dir = os.environ.get("FTL_CONFIG_DIR", str(DEFAULT_CONFIG_DIR))
        _configuration = load_ftl_configuration(config_dir)
    return _configuration


def reset_configuration() -> None:
    """Force the next request to reload the tables"""
    global _configuration
    _configuration = None


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class FlightPayload(BaseModel):
    """Roster flight as produced by the roster parser"""
    flight: Optional[str] = None
    date: Optional[str] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    dutyStart: Optional[str] = None   # "YYYY-MM-DD HH:MM"
    dutyEnd: Optional[str] = None     # "YYYY-MM-DD HH:MM"
    aircraft: Optional[str] = None
    destinationGMT: Optional[str] = None


class FtlDataResponse(BaseModel):
    limitHours: float
    latestArrivalTime: str  # HH:mm
    sectorCount: int
    dutyStartTime: str
    calculatedAt: str       # UTC ISO format


class FlightResponse(FlightPayload):
    ftlData: Optional[FtlDataResponse] = None


class CalculationRequest(BaseModel):
    crew_type: str = "tech"                  # "tech" or "cabin"
    acclimatization: str = "acclimatized"    # "acclimatized" or "non_acclimatized"
    flights: List[FlightPayload]


class EventResponse(BaseModel):
    level: str
    message: str
    context: Dict[str, Any] = {}


class CalculationResponse(BaseModel):
    crew_type: str
    acclimatization: str
    total_flights: int
    calculated_cycles: int
    flights: List[FlightResponse]
    events: List[EventResponse]


class LimitRequest(BaseModel):
    crew_type: str = "tech"
    acclimatization: str = "acclimatized"
    duty_start_time: str           # Local HH:mm
    sector_count: int = 1
    rest_hours: Optional[float] = None
    aircraft: Optional[str] = None


class LimitResponse(BaseModel):
    limit_hours: float
    latest_arrival_time: str
    table_key: str                 # Time band or rest rule used
    sector_count: int


# ============================================================================
# HELPERS
# ============================================================================

def _build_settings(crew_type: str, acclimatization: str) -> FtlSettings:
    try:
        return FtlSettings(crew_type=crew_type.lower(), acclimatization=acclimatization.lower())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid FTL settings: {e}")


def _load_configuration_or_503() -> FtlConfiguration:
    try:
        return get_configuration()
    except ConfigurationUnavailable as e:
        logger.error(f"FTL configuration unavailable: {e}")
        raise HTTPException(status_code=503, detail=f"FTL configuration unavailable: {e}")


def _run_calculation(flights: List[Flight], settings: FtlSettings) -> CalculationResponse:
    configuration = _load_configuration_or_503()
    reporter = CollectingReporter(logger)

    calculate_ftl_for_flights(flights, configuration, settings, reporter)

    return CalculationResponse(
        crew_type=settings.crew_type.value,
        acclimatization=settings.acclimatization.value,
        total_flights=len(flights),
        calculated_cycles=sum(1 for f in flights if f.ftl_data is not None),
        flights=[FlightResponse(**f.to_dict()) for f in flights],
        events=[EventResponse(**e.to_dict()) for e in reporter.events if e.level != 'debug'],
    )


def _payload_to_flight(payload: FlightPayload) -> Flight:
    return Flight(
        duty_start=payload.dutyStart,
        duty_end=payload.dutyEnd,
        aircraft=payload.aircraft,
        destination_gmt=payload.destinationGMT,
        flight_number=payload.flight,
        date=payload.date,
        origin=payload.origin,
        destination=payload.destination,
    )


# ============================================================================
# ENDPOINTS
# ============================================================================

@app.get("/")
async def root():
    """Service info"""
    return {
        "status": "ok",
        "service": "FTL Calculation API",
        "version": "1.0.0",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat()
    }


@app.post("/api/ftl/calculate", response_model=CalculationResponse)
async def calculate_ftl(request: CalculationRequest):
    """
    Calculate FTL data for a parsed roster.

    Returns every flight; the last flight of each calculated duty cycle
    carries ftlData.
    """
    settings = _build_settings(request.crew_type, request.acclimatization)
    flights = [_payload_to_flight(p) for p in request.flights]
    return _run_calculation(flights, settings)


@app.post("/api/ftl/upload", response_model=CalculationResponse)
async def upload_roster(
    file: UploadFile = File(...),
    crew_type: str = Form("tech"),
    acclimatization: str = Form("acclimatized"),
):
    """Upload a CSV flight list and get FTL data"""
    if not file.filename:
        raise HTTPException(status_code=400, detail="No file provided")
    if Path(file.filename).suffix.lower() != '.csv':
        raise HTTPException(status_code=400, detail="Unsupported file format. Use CSV.")

    settings = _build_settings(crew_type, acclimatization)

    with tempfile.NamedTemporaryFile(delete=False, suffix='.csv') as tmp:
        tmp.write(await file.read())
        tmp_path = tmp.name

    try:
        flights = FlightListParser().parse_csv(tmp_path)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid flight list: {e}")
    finally:
        os.unlink(tmp_path)

    return _run_calculation(flights, settings)


@app.post("/api/ftl/limit", response_model=LimitResponse)
async def lookup_limit(request: LimitRequest):
    """Resolve one FTL limit and its latest arrival time"""
    settings = _build_settings(request.crew_type, request.acclimatization)
    if request.sector_count < 1:
        raise HTTPException(status_code=400, detail="sector_count must be at least 1")

    try:
        clock_to_minutes(request.duty_start_time)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    configuration = _load_configuration_or_503()
    resolver = FTLLimitResolver(configuration, CollectingReporter(logger))
    table_key = resolver.get_table_key(
        settings.acclimatization, request.duty_start_time, request.rest_hours
    )
    limit_hours = resolver.resolve_limit(
        settings.crew_type,
        settings.acclimatization,
        request.duty_start_time,
        request.sector_count,
        request.rest_hours,
    )
    if limit_hours is None:
        raise HTTPException(
            status_code=404,
            detail=f"No FTL limit for {settings.crew_type.value}, "
                   f"{settings.acclimatization.value}, {table_key}"
        )

    latest_arrival = LatestArrivalCalculator(configuration.aircraft_groups).calculate_latest_arrival(
        request.duty_start_time, limit_hours, settings.crew_type, request.aircraft
    )

    return LimitResponse(
        limit_hours=limit_hours,
        latest_arrival_time=latest_arrival,
        table_key=table_key,
        sector_count=request.sector_count,
    )


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", 8000))

    print("=" * 70)
    print("FTL CALCULATION API SERVER")
    print("=" * 70)
    print(f"API will be available at: http://localhost:{port}")
    print(f"API docs at: http://localhost:{port}/docs")
    print()

    uvicorn.run(app, host="0.0.0.0", port=port)
