# app/models/registry_sequence.py
"""
Counter table for human-readable sequence tokens.
One row per sequence (e.g. "registry_id"). The row is locked for the whole
creating transaction, so last_value only advances when the insert commits.
"""

from sqlalchemy import Column, Integer, String
from app.database import Base


class RegistrySequence(Base):
    __tablename__ = "registry_sequences"

    name = Column(String(50), primary_key=True)
    last_value = Column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<RegistrySequence {self.name}={self.last_value}>"
