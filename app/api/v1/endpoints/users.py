# backend-server/app/api/v1/endpoints/users.py
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.db import models, session
from app.core import security
from app.schemas import employee as employee_schema
from app.services import directory

router = APIRouter()

class PasswordUpdate(BaseModel):
    current_password: str
    new_password: str

@router.get("/me", response_model=employee_schema.Employee)
def read_user_me(current_user: models.Employee = Depends(security.get_current_user)):
    """
    Get the details for the currently logged-in user.
    """
    return current_user

@router.put("/me/password", status_code=status.HTTP_204_NO_CONTENT)
def update_user_password(
    passwords: PasswordUpdate,
    db: Session = Depends(session.get_db),
    current_user: models.Employee = Depends(security.get_current_user)
):
    """
    Allows a logged-in user to change their own password.
    """
    directory.change_password(db, current_user, passwords.current_password, passwords.new_password)
    return
