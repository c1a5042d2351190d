# backend-server/app/schemas/task.py
from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import Optional

from app.core.clock import as_naive_utc

class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    assigned_to: int
    due_date: datetime
    scheduled_for: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v.strip()

    @field_validator("due_date", "scheduled_for")
    @classmethod
    def to_utc(cls, v):
        return as_naive_utc(v)

class TaskStatusUpdate(BaseModel):
    status: str

class Task(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    assigned_to: int
    assigned_by: int
    due_date: datetime
    scheduled_for: Optional[datetime] = None
    is_scheduled: bool
    status: str
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class TaskStatusResult(BaseModel):
    message: str
    task: Task
