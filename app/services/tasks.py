# backend-server/app/services/tasks.py
# Task lifecycle: assignment, status transitions, deletion and the
# scheduled-task activation step used by the sweep.
import logging
from datetime import datetime
from typing import List, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.clock import utcnow
from app.core.errors import AuthorizationError, Conflict, InvalidStatus, InvalidTransition, NotFound
from app.core.policy import authorize
from app.db import models
from app.schemas import task as task_schema
from app.services import directory

logger = logging.getLogger(__name__)

PENDING = "pending"
ASSIGNED = "assigned"
IN_PROGRESS = "in-progress"
COMPLETED = "completed"

# Statuses an employee sees in their own task list; pending tasks stay hidden
# until the sweep activates them.
VISIBLE_TO_ASSIGNEE = (ASSIGNED, IN_PROGRESS, COMPLETED)

# (current, requested) -> allowed. Pairs not listed are invalid transitions.
TRANSITIONS = {
    (ASSIGNED, IN_PROGRESS): True,
    (PENDING, IN_PROGRESS): True,
    (IN_PROGRESS, IN_PROGRESS): True,
    (IN_PROGRESS, COMPLETED): True,
    (IN_PROGRESS, ASSIGNED): True,
    (COMPLETED, ASSIGNED): True,
    # Moving back to pending parks the task: it leaves the assignee's list and,
    # with is_scheduled cleared, the sweep does not re-activate it.
    (IN_PROGRESS, PENDING): True,
    (COMPLETED, PENDING): True,
}


def _get_task(db: Session, task_id: int) -> models.Task:
    task = db.get(models.Task, task_id)
    if task is None:
        raise NotFound("Task not found")
    return task


def initial_state(scheduled_for: datetime | None, now: datetime) -> Tuple[bool, str]:
    """ (is_scheduled, status) for a task created at `now`. """
    if scheduled_for is not None and scheduled_for > now:
        return True, PENDING
    return False, ASSIGNED


def assign_task(db: Session, caller: models.Employee, task_in: task_schema.TaskCreate, now: datetime | None = None) -> models.Task:
    authorize("assign_task", caller)
    now = now or utcnow()

    assignee = db.get(models.Employee, task_in.assigned_to)
    if assignee is None:
        raise NotFound("Assigned employee not found")
    if not directory.same_company(caller, assignee):
        raise AuthorizationError("Cross-company assignment not allowed")

    is_scheduled, status = initial_state(task_in.scheduled_for, now)
    task = models.Task(
        title=task_in.title,
        description=task_in.description,
        assigned_to=assignee.id,
        assigned_by=caller.id,
        due_date=task_in.due_date,
        scheduled_for=task_in.scheduled_for,
        is_scheduled=is_scheduled,
        status=status,
        created_at=now,
        updated_at=now,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("Admin %s assigned task %s to employee %s (status=%s)", caller.id, task.id, assignee.id, status)
    return task


def list_tasks_for_admin(db: Session, caller: models.Employee) -> List[models.Task]:
    authorize("list_company_tasks", caller)
    employee_ids = directory.company_employee_ids(db, caller.company)
    if not employee_ids:
        return []
    return db.query(models.Task).filter(models.Task.assigned_to.in_(employee_ids)).order_by(models.Task.id).all()


def list_tasks_for_employee(db: Session, caller: models.Employee, employee_id: int) -> List[models.Task]:
    authorize("list_employee_tasks", caller)
    employee = db.get(models.Employee, employee_id)
    if employee is None or not directory.same_company(caller, employee):
        raise AuthorizationError("Access denied")
    return db.query(models.Task).filter(models.Task.assigned_to == employee.id).order_by(models.Task.id).all()


def list_my_tasks(db: Session, caller: models.Employee) -> List[models.Task]:
    authorize("list_my_tasks", caller)
    return db.query(models.Task).filter(
        models.Task.assigned_to == caller.id,
        models.Task.status.in_(VISIBLE_TO_ASSIGNEE),
    ).order_by(models.Task.id).all()


def get_task(db: Session, caller: models.Employee, task_id: int) -> models.Task:
    task = _get_task(db, task_id)
    authorize("view_task", caller, owner_id=task.assigned_to)
    return task


def update_task_status(db: Session, caller: models.Employee, task_id: int, new_status: str, now: datetime | None = None) -> Tuple[models.Task, str]:
    """
    Moves a task through its lifecycle on behalf of its assignee.

    Returns the task and a message for the client. The write only succeeds
    if the task still has the status read here; otherwise Conflict is raised.
    """
    task = _get_task(db, task_id)
    authorize("update_task_status", caller, owner_id=task.assigned_to)
    now = now or utcnow()

    if new_status not in models.TASK_STATUSES:
        raise InvalidStatus()

    current = task.status
    if not TRANSITIONS.get((current, new_status), False):
        raise InvalidTransition(current, new_status)

    if current == IN_PROGRESS and new_status == IN_PROGRESS:
        return task, "Task is already in-progress"

    changes = {
        models.Task.status: new_status,
        models.Task.is_scheduled: False,
        models.Task.updated_at: now,
    }
    if new_status == IN_PROGRESS and task.started_at is None:
        changes[models.Task.started_at] = now
    elif new_status == COMPLETED and task.completed_at is None:
        changes[models.Task.completed_at] = now
    elif new_status in (ASSIGNED, PENDING) and current == IN_PROGRESS:
        changes[models.Task.started_at] = None
        changes[models.Task.completed_at] = None

    updated = db.query(models.Task).filter(
        models.Task.id == task.id,
        models.Task.status == current,
    ).update(changes, synchronize_session=False)
    if updated != 1:
        db.rollback()
        raise Conflict("Task was modified concurrently, please retry.")
    db.commit()
    db.refresh(task)

    logger.info("Task %s: %s -> %s by employee %s", task.id, current, new_status, caller.id)
    return task, "Task status updated successfully"


def delete_task(db: Session, caller: models.Employee, task_id: int) -> None:
    task = _get_task(db, task_id)
    authorize("delete_task", caller, owner_id=task.assigned_by)
    db.delete(task)
    db.commit()
    logger.info("Admin %s deleted task %s", caller.id, task_id)


def activate_scheduled_tasks(db: Session, now: datetime) -> int:
    """
    Promotes every scheduled task whose `scheduled_for` has arrived from
    pending to assigned. `scheduled_for` is kept as a record. Each task is
    committed on its own; a failing task is logged and skipped.
    Returns the number of tasks activated.
    """
    due_ids = [row[0] for row in db.query(models.Task.id).filter(
        models.Task.is_scheduled.is_(True),
        models.Task.scheduled_for <= now,
    ).order_by(models.Task.id).all()]

    activated = 0
    for task_id in due_ids:
        try:
            updated = db.query(models.Task).filter(
                models.Task.id == task_id,
                models.Task.is_scheduled.is_(True),
            ).update({
                models.Task.is_scheduled: False,
                models.Task.status: ASSIGNED,
                models.Task.updated_at: now,
            }, synchronize_session=False)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to activate scheduled task %s", task_id)
            continue
        activated += updated
    return activated
