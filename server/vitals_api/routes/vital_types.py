"""Vital template API routes."""
import logging
from fastapi import APIRouter, HTTPException

from vital_alerts import InvalidReadingError, NormalRange

from ..models.vital import VitalType, VitalTypeCreate
from ..database import db_manager
from ..services import repository

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/vitals", tags=["Vital Types"])


@router.get("/types", response_model=list[VitalType])
async def get_vital_types():
    """List all vital templates ordered by name."""
    with db_manager.get_conn() as conn:
        rows = repository.list_vital_types(conn)
    return [VitalType(**repository.row_to_vital_type(row)) for row in rows]


@router.get("/types/{vital_type_id}", response_model=VitalType)
async def get_vital_type(vital_type_id: str):
    """Get a single vital template."""
    with db_manager.get_conn() as conn:
        row = repository.get_vital_type(conn, vital_type_id)
    if row is None:
        raise HTTPException(status_code=404, detail=f"Vital type {vital_type_id} not found")
    return VitalType(**repository.row_to_vital_type(row))


@router.post("/types", response_model=VitalType, status_code=201)
async def create_vital_type(body: VitalTypeCreate):
    """
    Create a vital template.
    Names are unique; either bound of the normal range may be omitted.
    """
    try:
        NormalRange(min=body.normal_range_min, max=body.normal_range_max)
    except InvalidReadingError as e:
        raise HTTPException(status_code=422, detail=str(e))

    with db_manager.get_conn() as conn:
        if repository.find_vital_type_by_name(conn, body.name) is not None:
            raise HTTPException(
                status_code=409,
                detail=f"Vital type '{body.name}' already exists",
            )
        vital_type_id = repository.insert_vital_type(
            conn,
            name=body.name,
            unit=body.unit,
            normal_range_min=body.normal_range_min,
            normal_range_max=body.normal_range_max,
            description=body.description,
        )
        row = repository.get_vital_type(conn, vital_type_id)

    log.info(f"[VITALS] Created vital type {body.name} ({body.unit})")
    return VitalType(**repository.row_to_vital_type(row))
