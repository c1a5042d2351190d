# backend-server/app/schemas/employee.py
from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional
from datetime import datetime

class EmployeeBase(BaseModel):
    username: str
    email: EmailStr
    designation: Optional[str] = None
    department: Optional[str] = None

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("username must not be blank")
        return v.strip()

class EmployeeCreate(EmployeeBase):
    """ Created by an admin; company and role are inherited, never supplied. """
    password: str

class AdminSignup(EmployeeBase):
    password: str
    company: str

    @field_validator("company")
    @classmethod
    def company_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("company must not be blank")
        return v.strip()

class EmployeeUpdate(BaseModel):
    username: Optional[str] = None
    designation: Optional[str] = None
    department: Optional[str] = None

class Employee(EmployeeBase):
    id: int
    role: str
    company: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
