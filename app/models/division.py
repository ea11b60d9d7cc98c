# app/models/division.py
"""
Divisions table: sub-units of a department.
A registry entry's division_id must belong to its department_id.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from app.database import Base


class Division(Base):
    __tablename__ = "divisions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    status = Column(String(20), default="active", nullable=False)
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<Division {self.id} name={self.name} dept={self.department_id}>"
