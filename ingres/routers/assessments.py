"""
Assessment API endpoints: latest assessments and historical readings.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from ingres.database import get_db
from ingres.schemas import CurrentAssessmentItem, ErrorResponse, HistoricalResponse
from ingres.services import QueryOrchestrator
from typing import List, Optional

router = APIRouter()


@router.get(
    "/current-assessment",
    response_model=List[CurrentAssessmentItem],
    responses={400: {"model": ErrorResponse}}
)
def get_current_assessment(
    region_id: Optional[str] = Query(None, description="Single region ID"),
    region_type: Optional[str] = Query(None, description="state, district, block, mandal or taluk"),
    limit: Optional[str] = Query(None, description="Page size (default 10, max 100)"),
    offset: Optional[str] = Query(None, description="Rows to skip"),
    db: Session = Depends(get_db)
):
    """
    Latest assessment of each matching region.

    - **region_id**: Restrict to one region
    - **region_type**: Restrict to one region type
    - **limit** / **offset**: Pagination
    """
    return QueryOrchestrator(db).current_assessments(
        region_id=region_id,
        region_type=region_type,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/historical-data",
    response_model=HistoricalResponse,
    response_model_exclude_unset=True,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}
)
def get_historical_data(
    region_id: Optional[str] = Query(None, description="Region ID (required)"),
    start_year: Optional[str] = Query(None, description="First year, inclusive"),
    end_year: Optional[str] = Query(None, description="Last year, inclusive"),
    parameter_type: Optional[str] = Query(None, description="recharge, extraction, water_level or quality"),
    limit: Optional[str] = Query(None, description="Page size (default 100, max 1000)"),
    offset: Optional[str] = Query(None, description="Rows to skip"),
    view_mode: Optional[str] = Query(None, description="raw (default) or yearly averages"),
    db: Session = Depends(get_db)
):
    """
    Historical readings for one region, newest first.

    With **view_mode=yearly** readings are averaged per year and parameter.
    """
    return QueryOrchestrator(db).historical(
        region_id=region_id,
        start_year=start_year,
        end_year=end_year,
        parameter_type=parameter_type,
        limit=limit,
        offset=offset,
        view_mode=view_mode,
    )
