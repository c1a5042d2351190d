# backend-server/app/services/shifts.py
# Shift tracking: one open shift per employee, closed with a work summary.
import logging
from datetime import datetime
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.clock import utcnow
from app.core.errors import Conflict, NotFound, ValidationError
from app.core.policy import authorize, ADMIN
from app.db import models
from app.services import directory

logger = logging.getLogger(__name__)


def shift_hours(start: datetime, end: datetime) -> float:
    return round((end - start).total_seconds() / 3600, 2)


def _get_shift(db: Session, shift_id: int) -> models.Shift:
    shift = db.get(models.Shift, shift_id)
    if shift is None:
        raise NotFound("Shift not found")
    return shift


def find_open_shift(db: Session, employee_id: int) -> models.Shift | None:
    return db.query(models.Shift).filter(
        models.Shift.employee_id == employee_id,
        models.Shift.end_time.is_(None),
    ).first()


def start_shift(db: Session, caller: models.Employee, now: datetime | None = None) -> models.Shift:
    authorize("start_shift", caller)
    now = now or utcnow()

    if find_open_shift(db, caller.id) is not None:
        raise Conflict("Shift already in progress")

    shift = models.Shift(employee_id=caller.id, start_time=now, end_time=None, created_at=now, updated_at=now)
    db.add(shift)
    try:
        db.commit()
    except IntegrityError:
        # a concurrent start won the race on the open-shift index
        db.rollback()
        raise Conflict("Shift already in progress")
    db.refresh(shift)
    logger.info("Employee %s started shift %s", caller.id, shift.id)
    return shift


def end_shift(db: Session, caller: models.Employee, shift_id: int, work_summary: str | None, now: datetime | None = None) -> models.Shift:
    shift = _get_shift(db, shift_id)
    authorize("end_shift", caller, owner_id=shift.employee_id)
    now = now or utcnow()

    summary = (work_summary or "").strip()
    if not summary:
        raise ValidationError("Work summary is required to end a shift")
    if shift.end_time is not None:
        raise Conflict("Shift already ended")

    updated = db.query(models.Shift).filter(
        models.Shift.id == shift.id,
        models.Shift.end_time.is_(None),
    ).update({
        models.Shift.end_time: now,
        models.Shift.work_summary: summary,
        models.Shift.total_hours: shift_hours(shift.start_time, now),
        models.Shift.updated_at: now,
    }, synchronize_session=False)
    if updated != 1:
        db.rollback()
        raise Conflict("Shift already ended")
    db.commit()
    db.refresh(shift)
    logger.info("Employee %s ended shift %s after %.2f hours", caller.id, shift.id, shift.total_hours)
    return shift


def get_shift(db: Session, caller: models.Employee, shift_id: int) -> models.Shift:
    shift = _get_shift(db, shift_id)
    authorize("view_shift", caller, owner_id=shift.employee_id, owner_company=shift.employee.company)
    return shift


def get_current_shift(db: Session, caller: models.Employee) -> models.Shift:
    authorize("current_shift", caller)
    shift = find_open_shift(db, caller.id)
    if shift is None:
        raise NotFound("No shift in progress")
    return shift


def list_shifts(db: Session, caller: models.Employee) -> List[models.Shift]:
    authorize("list_shifts", caller)
    query = db.query(models.Shift)
    if caller.role == ADMIN:
        employee_ids = directory.company_employee_ids(db, caller.company)
        query = query.filter(models.Shift.employee_id.in_(employee_ids))
    else:
        query = query.filter(models.Shift.employee_id == caller.id)
    return query.order_by(models.Shift.start_time.desc(), models.Shift.id.desc()).all()
