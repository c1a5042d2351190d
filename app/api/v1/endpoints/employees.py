# backend-server/app/api/v1/endpoints/employees.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.db import models, session
from app.core import security
from app.schemas import employee as employee_schema
from app.services import directory

router = APIRouter()

@router.post("", response_model=employee_schema.Employee, status_code=status.HTTP_201_CREATED)
def create_employee(
    employee_in: employee_schema.EmployeeCreate,
    db: Session = Depends(session.get_db),
    admin: models.Employee = Depends(security.get_current_user)
):
    """ Creates an employee in the admin's company. """
    return directory.create_employee(db, admin, employee_in)

@router.get("", response_model=List[employee_schema.Employee])
def get_all_employees(
    db: Session = Depends(session.get_db),
    admin: models.Employee = Depends(security.get_current_user)
):
    """ Retrieves every employee of the admin's company. """
    return directory.list_company_employees(db, admin)

@router.get("/{employee_id}", response_model=employee_schema.Employee)
def get_employee(
    employee_id: int,
    db: Session = Depends(session.get_db),
    admin: models.Employee = Depends(security.get_current_user)
):
    return directory.get_company_employee(db, admin, employee_id)

@router.put("/{employee_id}", response_model=employee_schema.Employee)
def update_employee(
    employee_id: int,
    updates: employee_schema.EmployeeUpdate,
    db: Session = Depends(session.get_db),
    admin: models.Employee = Depends(security.get_current_user)
):
    """ Updates an employee's name, designation or department. """
    return directory.update_employee(db, admin, employee_id, updates)

@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_employee(
    employee_id: int,
    db: Session = Depends(session.get_db),
    admin: models.Employee = Depends(security.get_current_user)
):
    """
    Deletes an employee along with the tasks assigned to them and their shifts.
    """
    directory.delete_employee(db, admin, employee_id)
    return
