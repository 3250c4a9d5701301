"""
Records Router - Student score records
app/routers/records.py

Endpoints:
- POST /api/save-record - Append one student's score to the records file
"""

import asyncio
import logging

from fastapi import APIRouter, Depends

from app.exceptions import BoundaryError
from app.models.api import SaveRecordRequest, SaveRecordResponse
from app.services.records_storage import RecordsStorage, get_records_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Records"])


@router.post("/save-record", response_model=SaveRecordResponse, summary="Save a student record")
async def save_record(
    request: SaveRecordRequest,
    storage: RecordsStorage = Depends(get_records_storage),
):
    if not request.name or not request.block:
        raise BoundaryError("Name and block are required fields", 400)

    try:
        record = await asyncio.to_thread(storage.append, request)
    except OSError as e:
        logger.error(f"❌ Error saving record: {e}")
        raise BoundaryError("Failed to save record", 500) from e

    return SaveRecordResponse(record=record)
