# backend-server/app/api/v1/endpoints/auth.py
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from app.db import session
from app.core import security
from app.schemas import token as token_schema
from app.schemas import employee as employee_schema
from app.services import directory

router = APIRouter()

@router.post("/signup", response_model=employee_schema.Employee, status_code=status.HTTP_201_CREATED)
def signup(signup_in: employee_schema.AdminSignup, db: Session = Depends(session.get_db)):
    """ Registers the admin account of a new company. """
    return directory.register_admin(db, signup_in)

@router.post("/token", response_model=token_schema.Token)
def login(db: Session = Depends(session.get_db), form_data: OAuth2PasswordRequestForm = Depends()):
    # the OAuth2 form's "username" field carries the email
    user = directory.authenticate(db, form_data.username, form_data.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect username or password")

    access_token = security.create_employee_token(user)
    return {"access_token": access_token, "token_type": "bearer"}
