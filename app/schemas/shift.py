# backend-server/app/schemas/shift.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional

class ShiftEnd(BaseModel):
    work_summary: Optional[str] = None

class Shift(BaseModel):
    id: int
    employee_id: int
    start_time: datetime
    end_time: Optional[datetime] = None
    work_summary: Optional[str] = None
    total_hours: Optional[float] = None
    elapsed_hours: float
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
