"""
Export API endpoints.
"""
from fastapi import APIRouter, Depends, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session
from ingres.database import get_db
from ingres.schemas import ErrorResponse, StructuredExport
from ingres.services import QueryOrchestrator
from ingres.services.export_encoder import CSV_MEDIA_TYPE, attachment_headers, export_filename
from typing import Optional

router = APIRouter()


@router.get(
    "/export",
    responses={
        200: {"model": StructuredExport, "description": "json/excel envelope, or text/csv"},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    }
)
def export_data(
    format: Optional[str] = Query(None, description="csv, json or excel"),
    data_type: Optional[str] = Query(None, description="assessments, historical, regions or critical"),
    region_ids: Optional[str] = Query(None, description="Comma-separated region IDs"),
    start_year: Optional[str] = Query(None, description="First year, inclusive"),
    end_year: Optional[str] = Query(None, description="Last year, inclusive"),
    stage: Optional[str] = Query(None, description="Assessment stage filter"),
    db: Session = Depends(get_db)
):
    """
    Export a dataset.

    - **csv**: delimited text attachment
    - **json**: `{exportType, timestamp, recordCount, data}`
    - **excel**: the json envelope plus a conversion note
    """
    result = QueryOrchestrator(db).export(
        format=format,
        data_type=data_type,
        region_ids=region_ids,
        start_year=start_year,
        end_year=end_year,
        stage=stage,
    )

    if result.format == "csv":
        return Response(
            content=result.body,
            media_type=CSV_MEDIA_TYPE,
            headers=attachment_headers(export_filename(result.export_type)),
        )
    if result.format == "excel":
        return JSONResponse(content=jsonable_encoder(result.body), headers={"X-Export-Format": "excel-json"})
    return result.body


@router.get(
    "/simple-export",
    responses={400: {"model": ErrorResponse}}
)
def simple_export(
    format: Optional[str] = Query(None, description="json or csv"),
    type: Optional[str] = Query(None, description="assessments or regions"),
    region_id: Optional[str] = Query(None, description="Optional single region ID"),
    db: Session = Depends(get_db)
):
    """Unfiltered assessments or regions; json returns the bare row list."""
    result = QueryOrchestrator(db).simple_export(format=format, type=type, region_id=region_id)

    if result.format == "csv":
        return Response(
            content=result.body,
            media_type=CSV_MEDIA_TYPE,
            headers=attachment_headers(f"{result.export_type}.csv"),
        )
    return result.body
