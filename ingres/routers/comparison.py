"""
Comparison API endpoints: year-aligned region comparison and critical units.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from ingres.database import get_db
from ingres.schemas import ComparisonResponse, CriticalUnitsResponse, ErrorResponse
from ingres.services import QueryOrchestrator
from typing import Optional

router = APIRouter()


@router.get(
    "/compare-regions",
    response_model=ComparisonResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}
)
def compare_regions(
    region_ids: Optional[str] = Query(None, description="Comma-separated region IDs"),
    year: Optional[str] = Query(None, description="Comparison year (default: latest across the set)"),
    parameters: Optional[str] = Query(None, description="recharge, extraction, stage, trend"),
    db: Session = Depends(get_db)
):
    """
    Compare regions for a single assessment year.

    Without **year**, the most recent year held by any requested region is
    used. Regions with no assessment that year are listed in `missingRegions`.
    """
    return QueryOrchestrator(db).compare(
        region_ids=region_ids,
        year=year,
        parameters=parameters,
    )


@router.get(
    "/critical-units",
    response_model=CriticalUnitsResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}
)
def get_critical_units(
    stage: Optional[str] = Query(None, description="Comma-separated stages"),
    state_id: Optional[str] = Query(None, description="Parent state ID"),
    limit: Optional[str] = Query(None, description="Page size (default 50, max 200)"),
    offset: Optional[str] = Query(None, description="Rows to skip"),
    db: Session = Depends(get_db)
):
    """Regions whose latest assessment is in a critical stage, worst first."""
    return QueryOrchestrator(db).critical_units(
        stage=stage,
        state_id=state_id,
        limit=limit,
        offset=offset,
    )
