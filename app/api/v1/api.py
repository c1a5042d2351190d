# backend-server/app/api/v1/api.py
from fastapi import APIRouter
from app.api.v1.endpoints import employees, tasks, shifts, users

api_router = APIRouter()

api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(employees.router, prefix="/employees", tags=["Employees"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])
api_router.include_router(shifts.router, prefix="/shifts", tags=["Shifts"])
