# backend-server/app/db/models.py
from sqlalchemy import ( Column, Integer, String, ForeignKey, DateTime, Text, Boolean, Float, CheckConstraint, Index, text )
from sqlalchemy.orm import relationship
from sqlalchemy.ext.declarative import declarative_base

from app.core.clock import utcnow

Base = declarative_base()

TASK_STATUSES = ("pending", "assigned", "in-progress", "completed")


class TimestampMixin:
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class Employee(TimestampMixin, Base):
    __tablename__ = "employees"
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    designation = Column(String(100), nullable=True)
    department = Column(String(100), nullable=True)
    role = Column(String(20), nullable=False, default="employee")
    company = Column(String(100), nullable=False, index=True)
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'employee')"),
        # at most one admin per company
        Index("uq_company_admin", "company", unique=True,
              sqlite_where=text("role = 'admin'"), postgresql_where=text("role = 'admin'")),
    )
    tasks = relationship("Task", foreign_keys="Task.assigned_to", back_populates="assignee")
    shifts = relationship("Shift", back_populates="employee")


class Task(TimestampMixin, Base):
    __tablename__ = "tasks"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    assigned_to = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    assigned_by = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    due_date = Column(DateTime, nullable=False)
    scheduled_for = Column(DateTime, nullable=True)
    is_scheduled = Column(Boolean, nullable=False, default=False, index=True)
    status = Column(String(20), nullable=False)
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    __table_args__ = ( CheckConstraint("status IN ('pending', 'assigned', 'in-progress', 'completed')"), )
    assignee = relationship("Employee", foreign_keys=[assigned_to], back_populates="tasks")
    assigner = relationship("Employee", foreign_keys=[assigned_by])


class Shift(TimestampMixin, Base):
    __tablename__ = "shifts"
    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    start_time = Column(DateTime, nullable=False, default=utcnow)
    end_time = Column(DateTime, nullable=True)
    work_summary = Column(Text, nullable=True)
    total_hours = Column(Float, nullable=True)
    __table_args__ = (
        # at most one open shift per employee
        Index("uq_open_shift", "employee_id", unique=True,
              sqlite_where=text("end_time IS NULL"), postgresql_where=text("end_time IS NULL")),
    )
    employee = relationship("Employee", back_populates="shifts")

    @property
    def elapsed_hours(self) -> float:
        """Stored total for a closed shift, running total for an open one."""
        if self.end_time is not None and self.total_hours is not None:
            return self.total_hours
        end = self.end_time or utcnow()
        return round((end - self.start_time).total_seconds() / 3600, 2)
