# backend-server/app/api/v1/endpoints/shifts.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.db import models, session
from app.core import security
from app.schemas import shift as shift_schema
from app.services import shifts as shift_service

router = APIRouter()

@router.post("/start", response_model=shift_schema.Shift, status_code=status.HTTP_201_CREATED)
def start_shift(
    db: Session = Depends(session.get_db),
    current_user: models.Employee = Depends(security.get_current_user)
):
    return shift_service.start_shift(db, current_user)

@router.put("/end/{shift_id}", response_model=shift_schema.Shift)
def end_shift(
    shift_id: int,
    shift_end: shift_schema.ShiftEnd,
    db: Session = Depends(session.get_db),
    current_user: models.Employee = Depends(security.get_current_user)
):
    """ Closes the caller's shift; a work summary is required. """
    return shift_service.end_shift(db, current_user, shift_id, shift_end.work_summary)

@router.get("", response_model=List[shift_schema.Shift])
def get_shifts(
    db: Session = Depends(session.get_db),
    current_user: models.Employee = Depends(security.get_current_user)
):
    """ Admins get every shift in their company, employees get their own. """
    return shift_service.list_shifts(db, current_user)

@router.get("/current", response_model=shift_schema.Shift)
def get_current_shift(
    db: Session = Depends(session.get_db),
    current_user: models.Employee = Depends(security.get_current_user)
):
    return shift_service.get_current_shift(db, current_user)

@router.get("/{shift_id}", response_model=shift_schema.Shift)
def get_shift(
    shift_id: int,
    db: Session = Depends(session.get_db),
    current_user: models.Employee = Depends(security.get_current_user)
):
    return shift_service.get_shift(db, current_user, shift_id)
