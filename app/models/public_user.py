# app/models/public_user.py
"""
Public users table: pre-registered visitor accounts (distinct from staff).
Owned by the public-account module; the registry only reads it to resolve
visitor linkage and to show the linked account name.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from app.database import Base


class PublicUser(Base):
    __tablename__ = "public_users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    public_id = Column(String(20), unique=True, nullable=False, index=True)  # PUB00007
    name = Column(String(200), nullable=False)
    nic = Column(String(20), nullable=False, index=True)
    address = Column(Text)
    phone = Column(String(20))
    department_id = Column(Integer, ForeignKey("departments.id"))
    division_id = Column(Integer, ForeignKey("divisions.id"))
    status = Column(String(20), default="active", nullable=False)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    def __repr__(self):
        return f"<PublicUser {self.public_id} name={self.name}>"
