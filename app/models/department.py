# app/models/department.py
"""
Departments table: the office units a visitor can be registered against.
Read-only from the registry's point of view (resolved and joined for display).
"""

from sqlalchemy import Column, Integer, String, DateTime
from app.database import Base


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), unique=True, nullable=False)
    code = Column(String(50))
    status = Column(String(20), default="active", nullable=False)  # active | inactive
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<Department {self.id} name={self.name}>"
