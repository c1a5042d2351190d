# backend-server/app/api/v1/endpoints/tasks.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.db import models, session
from app.core import security
from app.schemas import task as task_schema
from app.services import tasks as task_service

router = APIRouter()

# --- Admin ---

@router.post("/assign", response_model=task_schema.Task, status_code=status.HTTP_201_CREATED)
def assign_task(
    task_in: task_schema.TaskCreate,
    db: Session = Depends(session.get_db),
    current_user: models.Employee = Depends(security.get_current_user)
):
    """ Assigns a task to an employee of the admin's company, optionally scheduled for later. """
    return task_service.assign_task(db, current_user, task_in)

@router.get("", response_model=List[task_schema.Task])
def get_all_tasks(
    db: Session = Depends(session.get_db),
    current_user: models.Employee = Depends(security.get_current_user)
):
    """ Every task assigned within the admin's company. """
    return task_service.list_tasks_for_admin(db, current_user)

@router.get("/employee/{employee_id}", response_model=List[task_schema.Task])
def get_tasks_by_employee(
    employee_id: int,
    db: Session = Depends(session.get_db),
    current_user: models.Employee = Depends(security.get_current_user)
):
    return task_service.list_tasks_for_employee(db, current_user, employee_id)

@router.delete("/{task_id}")
def delete_task(
    task_id: int,
    db: Session = Depends(session.get_db),
    current_user: models.Employee = Depends(security.get_current_user)
):
    task_service.delete_task(db, current_user, task_id)
    return {"message": "Task deleted successfully."}

# --- Employee ---

@router.get("/my", response_model=List[task_schema.Task])
def get_my_tasks(
    db: Session = Depends(session.get_db),
    current_user: models.Employee = Depends(security.get_current_user)
):
    """ The caller's active and finished tasks; scheduled tasks appear once activated. """
    return task_service.list_my_tasks(db, current_user)

@router.put("/update/{task_id}", response_model=task_schema.TaskStatusResult)
def update_task_status(
    task_id: int,
    update: task_schema.TaskStatusUpdate,
    db: Session = Depends(session.get_db),
    current_user: models.Employee = Depends(security.get_current_user)
):
    task, message = task_service.update_task_status(db, current_user, task_id, update.status)
    return {"message": message, "task": task_schema.Task.model_validate(task)}

@router.get("/{task_id}", response_model=task_schema.Task)
def get_task(
    task_id: int,
    db: Session = Depends(session.get_db),
    current_user: models.Employee = Depends(security.get_current_user)
):
    return task_service.get_task(db, current_user, task_id)
