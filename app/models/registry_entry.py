# app/models/registry_entry.py
"""
Registry entries table: one row per visitor office visit.
Append-only log: visitor fields are a snapshot taken at entry time and are
never updated, even if the linked public user changes later. Rows are never
hard-deleted; status only moves forward (active → checked_out → deleted).
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from app.database import Base

VISITOR_NEW = "new"
VISITOR_EXISTING = "existing"
VISITOR_TYPES = (VISITOR_NEW, VISITOR_EXISTING)

STATUS_ACTIVE = "active"
STATUS_CHECKED_OUT = "checked_out"
STATUS_DELETED = "deleted"
STATUSES = (STATUS_ACTIVE, STATUS_CHECKED_OUT, STATUS_DELETED)

# Allowed forward transitions; nothing returns to active
STATUS_TRANSITIONS = {
    STATUS_ACTIVE: {STATUS_CHECKED_OUT, STATUS_DELETED},
    STATUS_CHECKED_OUT: {STATUS_DELETED},
    STATUS_DELETED: set(),
}


class RegistryEntry(Base):
    __tablename__ = "registry_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    registry_id = Column(String(20), unique=True, nullable=False, index=True)  # REG00001
    public_user_id = Column(Integer, ForeignKey("public_users.id"))            # null = no prior account
    visitor_name = Column(String(200), nullable=False)
    visitor_nic = Column(String(20), nullable=False, index=True)
    visitor_address = Column(Text)
    visitor_phone = Column(String(20))
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=False, index=True)
    division_id = Column(Integer, ForeignKey("divisions.id"))
    purpose_of_visit = Column(Text, nullable=False)
    remarks = Column(Text)
    visitor_type = Column(String(20), default=VISITOR_NEW, nullable=False)   # new | existing
    status = Column(String(20), default=STATUS_ACTIVE, nullable=False, index=True)
    entry_time = Column(DateTime, nullable=False, index=True)
    created_by = Column(Integer)              # staff/admin account id (external)
    updated_at = Column(DateTime)             # set on status change only

    def __repr__(self):
        return f"<RegistryEntry {self.registry_id} visitor={self.visitor_name} status={self.status}>"
