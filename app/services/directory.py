# backend-server/app/services/directory.py
# Identity directory: employee records, company membership and the
# company -> employee id resolution used to scope tasks and shifts.
import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core import security
from app.core.errors import Conflict, NotFound, AuthorizationError, ValidationError
from app.core.policy import authorize, ADMIN, EMPLOYEE
from app.db import models
from app.schemas import employee as employee_schema

logger = logging.getLogger(__name__)


def get_employee(db: Session, employee_id: int) -> models.Employee:
    employee = db.get(models.Employee, employee_id)
    if employee is None:
        raise NotFound("Employee not found")
    return employee


def company_employee_ids(db: Session, company: str) -> List[int]:
    """ Ids of every employee (admins included) belonging to `company`. """
    rows = db.query(models.Employee.id).filter(models.Employee.company == company).all()
    return [id_tuple[0] for id_tuple in rows]


def same_company(a: models.Employee, b: models.Employee) -> bool:
    return a.company == b.company


def authenticate(db: Session, email: str, password: str) -> models.Employee | None:
    user = db.query(models.Employee).filter(models.Employee.email == email.lower()).first()
    if not user or not security.verify_password(password, user.hashed_password):
        return None
    return user


def _ensure_email_free(db: Session, email: str) -> None:
    if db.query(models.Employee).filter(models.Employee.email == email).first():
        raise Conflict("Employee with this email already exists")


def _commit_new(db: Session, employee: models.Employee, conflict_message: str) -> models.Employee:
    db.add(employee)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(conflict_message)
    db.refresh(employee)
    return employee


def register_admin(db: Session, signup: employee_schema.AdminSignup) -> models.Employee:
    """ Self-registration: the new account becomes the admin of `signup.company`. """
    email = signup.email.lower()
    _ensure_email_free(db, email)

    existing_admin = db.query(models.Employee).filter(
        models.Employee.company == signup.company,
        models.Employee.role == ADMIN,
    ).first()
    if existing_admin:
        raise Conflict("An admin already exists for this company.")

    admin = models.Employee(
        username=signup.username, email=email,
        hashed_password=security.get_password_hash(signup.password),
        designation=signup.designation, department=signup.department,
        role=ADMIN, company=signup.company,
    )
    admin = _commit_new(db, admin, "An admin already exists for this company.")
    logger.info("Registered admin %s for company %r", admin.id, admin.company)
    return admin


def create_employee(db: Session, caller: models.Employee, employee_in: employee_schema.EmployeeCreate) -> models.Employee:
    authorize("manage_employees", caller)
    email = employee_in.email.lower()
    _ensure_email_free(db, email)

    employee = models.Employee(
        username=employee_in.username, email=email,
        hashed_password=security.get_password_hash(employee_in.password),
        designation=employee_in.designation, department=employee_in.department,
        role=EMPLOYEE, company=caller.company,
    )
    employee = _commit_new(db, employee, "Employee with this email already exists")
    logger.info("Admin %s created employee %s", caller.id, employee.id)
    return employee


def list_company_employees(db: Session, caller: models.Employee) -> List[models.Employee]:
    authorize("manage_employees", caller)
    return db.query(models.Employee).filter(models.Employee.company == caller.company).order_by(models.Employee.id).all()


def get_company_employee(db: Session, caller: models.Employee, employee_id: int) -> models.Employee:
    authorize("manage_employees", caller)
    employee = get_employee(db, employee_id)
    if not same_company(caller, employee):
        raise AuthorizationError("Access denied")
    return employee


def update_employee(db: Session, caller: models.Employee, employee_id: int, updates: employee_schema.EmployeeUpdate) -> models.Employee:
    employee = get_company_employee(db, caller, employee_id)

    update_data = updates.dict(exclude_unset=True)
    if "username" in update_data and not (update_data["username"] or "").strip():
        raise ValidationError("username must not be blank")
    for field, value in update_data.items():
        setattr(employee, field, value)

    db.commit()
    db.refresh(employee)
    return employee


def delete_employee(db: Session, caller: models.Employee, employee_id: int) -> None:
    """
    Deletes an employee of the caller's company together with the tasks
    assigned to them and their shifts. Admin accounts cannot be deleted here,
    so no task is ever left with a dangling `assigned_by`.
    """
    employee = get_company_employee(db, caller, employee_id)
    if employee.id == caller.id:
        raise ValidationError("You cannot delete your own account")
    if employee.role == ADMIN:
        raise ValidationError("Admin accounts cannot be deleted")

    task_count = db.query(models.Task).filter(models.Task.assigned_to == employee.id).delete(synchronize_session=False)
    shift_count = db.query(models.Shift).filter(models.Shift.employee_id == employee.id).delete(synchronize_session=False)
    db.delete(employee)
    db.commit()
    logger.info("Deleted employee %s (%d tasks, %d shifts)", employee_id, task_count, shift_count)


def change_password(db: Session, user: models.Employee, current_password: str, new_password: str) -> None:
    if not security.verify_password(current_password, user.hashed_password):
        raise ValidationError("Incorrect current password")
    user.hashed_password = security.get_password_hash(new_password)
    db.commit()
