"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from app.schemas import (
    LevelPresentation,
    MonitorRequest,
    MonitorResponse,
    ReadingPayload,
    RecordReadingRequest,
    ZoneAnalysisRequest,
    ZoneAnalysisResponse,
    ZoneOperationRequest,
    ZoneOperationResult,
)
from datastore.readings import ReadingStore, build_default_store
from models.records import PollutionLevel
from services.analysis import (
    OverlayReadingProvider,
    PollutionAnalyzer,
    build_default_analyzer,
    level_to_color,
    level_to_icon,
)
from services.monitor import ZoneMonitor
from services.zone_operations import GeometricZoneOperator, build_default_operator

router = APIRouter()


def get_analyzer() -> PollutionAnalyzer:
    return build_default_analyzer()


def get_store() -> ReadingStore:
    return build_default_store()


def get_operator() -> GeometricZoneOperator:
    return build_default_operator()


def get_monitor() -> ZoneMonitor:
    return ZoneMonitor()


async def _analyze(
    request: ZoneAnalysisRequest,
    analyzer: PollutionAnalyzer,
    store: ReadingStore,
) -> ZoneAnalysisResponse:
    sensors = [sensor.to_domain() for sensor in request.sensors]
    if request.at is not None:
        analysis = analyzer.analyze_historical(sensors, request.at, zone_id=request.zone_id)
    else:
        embedded = {sensor.id: sensor.reading for sensor in sensors if sensor.reading is not None}
        provider = OverlayReadingProvider(embedded, fallback=store)
        analysis = await analyzer.analyze_zone(sensors, provider, zone_id=request.zone_id)
    return ZoneAnalysisResponse(
        zone_id=request.zone_id,
        zone_name=request.zone_name or f"Zone {request.zone_id}",
        **analysis.model_dump(),
    )


@router.post(
    "/readings",
    status_code=status.HTTP_201_CREATED,
    response_model=ReadingPayload,
    summary="Record the latest reading of a sensor.",
)
async def record_reading(
    payload: RecordReadingRequest,
    store: ReadingStore = Depends(get_store),
) -> ReadingPayload:
    reading = payload.to_domain()
    store.put(payload.sensor_id, reading)
    return ReadingPayload.from_domain(reading)


@router.get(
    "/sensors/{sensor_id}/reading",
    response_model=ReadingPayload,
    summary="Fetch the latest stored reading of a sensor.",
)
async def get_latest_reading(
    sensor_id: str,
    store: ReadingStore = Depends(get_store),
) -> ReadingPayload:
    reading = store.get(sensor_id)
    if reading is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No reading recorded for sensor {sensor_id!r}.",
        )
    return ReadingPayload.from_domain(reading)


@router.post(
    "/zones/analysis",
    response_model=ZoneAnalysisResponse,
    summary="Classify a zone's sensors and compute its risk score and alert level.",
)
async def analyze_zone(
    request: ZoneAnalysisRequest,
    analyzer: PollutionAnalyzer = Depends(get_analyzer),
    store: ReadingStore = Depends(get_store),
) -> ZoneAnalysisResponse:
    return await _analyze(request, analyzer, store)


@router.post(
    "/zones/operations",
    response_model=Optional[ZoneOperationResult],
    summary="Derive a zone by union, intersection, 1km buffer or containment check.",
)
def perform_zone_operation(
    request: ZoneOperationRequest,
    operator: GeometricZoneOperator = Depends(get_operator),
) -> Optional[ZoneOperationResult]:
    return operator.perform_operation(request.operation, request.zones)


@router.post(
    "/monitor",
    response_model=MonitorResponse,
    summary="Analyse several zones and report alerts and fleet statistics.",
)
async def monitor_zones(
    request: MonitorRequest,
    analyzer: PollutionAnalyzer = Depends(get_analyzer),
    store: ReadingStore = Depends(get_store),
    monitor: ZoneMonitor = Depends(get_monitor),
) -> MonitorResponse:
    zones = [await _analyze(zone, analyzer, store) for zone in request.zones]
    return MonitorResponse(
        zones=zones,
        alerts=monitor.build_alerts(zones),
        stats=monitor.summarize(zones),
    )


@router.get(
    "/levels",
    response_model=List[LevelPresentation],
    summary="Presentation color and icon for each pollution level.",
)
async def pollution_levels() -> List[LevelPresentation]:
    return [
        LevelPresentation(level=level, color=level_to_color(level), icon=level_to_icon(level))
        for level in PollutionLevel
    ]


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
