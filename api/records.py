from fastapi import APIRouter, Depends, Form
from pydantic import BaseModel, field_validator
from typing import List, Optional, Union
from datetime import datetime, timezone
from core.dependencies import get_record_service
from services.record_service import RecordService

router = APIRouter()

# Pydantic models
class RecordData(BaseModel):
    text: str
    amount: float
    category: str
    date: str

class RecordResponse(BaseModel):
    id: str
    text: str
    amount: float
    category: str
    date: datetime
    user_id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("date")
    @classmethod
    def date_as_utc(cls, value: datetime) -> datetime:
        # dates are stored at 12:00 UTC; SQLite drops the offset
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

class CreateRecordResult(BaseModel):
    data: Optional[RecordData] = None
    error: Optional[str] = None

class DeleteRecordResult(BaseModel):
    message: Optional[str] = None
    error: Optional[str] = None

class RecordsResult(BaseModel):
    records: Optional[List[RecordResponse]] = None
    error: Optional[str] = None

class BestWorstResult(BaseModel):
    bestExpense: Optional[Union[int, float]] = None
    worstExpense: Optional[Union[int, float]] = None
    error: Optional[str] = None

class TotalsResult(BaseModel):
    record: Optional[Union[int, float]] = None
    daysWithRecords: Optional[int] = None
    error: Optional[str] = None

@router.post("", response_model=CreateRecordResult, response_model_exclude_none=True)
async def create_record(
    text: Optional[str] = Form(None),
    amount: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    date: Optional[str] = Form(None),
    service: RecordService = Depends(get_record_service)
):
    """Create a new expense record."""
    return await service.add_record(text, amount, category, date)

@router.get("", response_model=RecordsResult, response_model_exclude_none=True)
async def list_records(service: RecordService = Depends(get_record_service)):
    """Get the 10 most recent records of the current user."""
    result = await service.get_records()
    if "records" in result:
        return {"records": [RecordResponse.model_validate(record) for record in result["records"]]}
    return result

@router.get("/best-worst", response_model=BestWorstResult, response_model_exclude_none=True)
async def best_worst_expense(service: RecordService = Depends(get_record_service)):
    """Get the highest and lowest expense amounts."""
    return await service.get_best_worst_expense()

@router.get("/totals", response_model=TotalsResult, response_model_exclude_none=True)
async def record_totals(service: RecordService = Depends(get_record_service)):
    """Get the total amount and the number of records with a positive amount."""
    return await service.get_user_record()

@router.delete("/{record_id}", response_model=DeleteRecordResult, response_model_exclude_none=True)
async def delete_record(record_id: str, service: RecordService = Depends(get_record_service)):
    """Delete a record owned by the current user."""
    return await service.delete_record(record_id)
