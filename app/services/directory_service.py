# app/services/directory_service.py
"""
Read access to the entities the registry links to: departments, divisions
and public user accounts. Used by registry_service to resolve references.
"""

from sqlalchemy.orm import Session
from app.models.department import Department
from app.models.division import Division
from app.models.public_user import PublicUser


def get_department(db: Session, department_id: int):
    """Find a department by id. Returns None if not found."""
    return db.query(Department).filter(Department.id == department_id).first()


def get_division(db: Session, division_id: int):
    """Find a division by id. Returns None if not found."""
    return db.query(Division).filter(Division.id == division_id).first()


def get_public_user(db: Session, public_user_id: int):
    """Find a public user account by id. Returns None if not found."""
    return db.query(PublicUser).filter(PublicUser.id == public_user_id).first()
