# app/services/registry_query_service.py
"""
Read side of the registry.
Entries are joined at query time with department, division and public-user
names for display. Those names are never stored on the entry itself.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import Session

from app.exceptions import NotFound, StoreUnavailable, ValidationError
from app.models.department import Department
from app.models.division import Division
from app.models.public_user import PublicUser
from app.models.registry_entry import RegistryEntry, STATUS_ACTIVE, STATUSES
from app.utils.logger import get_logger

logger = get_logger(__name__)

ENTRY_COLUMNS = (
    "id", "registry_id", "public_user_id", "visitor_name", "visitor_nic",
    "visitor_address", "visitor_phone", "department_id", "division_id",
    "purpose_of_visit", "remarks", "visitor_type", "status", "entry_time",
    "created_by", "updated_at",
)


def escape_like(text: str) -> str:
    """Make % and _ in user input match literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _projection(db: Session):
    return (
        db.query(
            RegistryEntry,
            Department.name.label("department_name"),
            Division.name.label("division_name"),
            PublicUser.name.label("public_user_name"),
            PublicUser.public_id.label("public_id"),
        )
        .outerjoin(Department, RegistryEntry.department_id == Department.id)
        .outerjoin(Division, RegistryEntry.division_id == Division.id)
        .outerjoin(PublicUser, RegistryEntry.public_user_id == PublicUser.id)
    )


def _to_row(result) -> dict:
    entry = result[0]
    row = {name: getattr(entry, name) for name in ENTRY_COLUMNS}
    row["department_name"] = result.department_name
    row["division_name"] = result.division_name
    row["public_user_name"] = result.public_user_name
    row["public_id"] = result.public_id
    return row


def list_registry_entries(
    db: Session,
    entry_date: Optional[date] = None,
    department_id: Optional[int] = None,
    search: Optional[str] = None,
    status: str = STATUS_ACTIVE,
    limit: Optional[int] = None,
    offset: int = 0,
) -> list:
    """
    Entries for one calendar day (today by default), newest first.
    search is a case-insensitive substring match on visitor name, NIC and registry ID.
    """
    if status not in STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(STATUSES)}")

    day = entry_date or date.today()
    start = datetime.combine(day, time.min)
    q = _projection(db).filter(
        RegistryEntry.status == status,
        RegistryEntry.entry_time >= start,
        RegistryEntry.entry_time < start + timedelta(days=1),
    )
    if department_id is not None:
        q = q.filter(RegistryEntry.department_id == department_id)
    if search and search.strip():
        pattern = f"%{escape_like(search.strip())}%"
        q = q.filter(or_(
            RegistryEntry.visitor_name.ilike(pattern, escape="\\"),
            RegistryEntry.visitor_nic.ilike(pattern, escape="\\"),
            RegistryEntry.registry_id.ilike(pattern, escape="\\"),
        ))

    q = q.order_by(RegistryEntry.entry_time.desc(), RegistryEntry.id.desc())
    if offset:
        q = q.offset(offset)
    if limit is not None:
        q = q.limit(limit)

    try:
        rows = [_to_row(r) for r in q.all()]
    except (OperationalError, InterfaceError) as e:
        logger.error(f"[QUERY] Store unavailable: {e}")
        raise StoreUnavailable() from e

    logger.info(f"[QUERY] date={day} dept={department_id} search={search!r} status={status} → {len(rows)} entries")
    return rows


def get_registry_entry(db: Session, entry_id: int) -> dict:
    """One entry with its display names, whatever its status."""
    try:
        result = _projection(db).filter(RegistryEntry.id == entry_id).first()
    except (OperationalError, InterfaceError) as e:
        logger.error(f"[QUERY] Store unavailable: {e}")
        raise StoreUnavailable() from e
    if result is None:
        raise NotFound(f"Registry entry {entry_id} not found")
    return _to_row(result)
