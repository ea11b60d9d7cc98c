# app/services/registry_service.py
"""
Registry entry creation and status changes.

How creation works:
  - Mandatory fields are checked first (ValidationError → 400, nothing touched)
  - Department / division / public-user references are resolved
  - next_registry_id() reserves the ID under a lock, the entry is inserted
    with status=active and entry_time=now, and both commit together
  - Any failure rolls the whole unit back; registry_id unique conflicts are
    retried up to REGISTRY_CREATE_MAX_RETRIES times, with the counter reseeded
    from the stored rows so each retry gets a fresh ID

Entries are a log: visitor fields are never updated after creation. The only
mutations are forward status changes (check-out and soft delete).
"""

from contextlib import contextmanager
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import (
    InvalidStatusTransition,
    NotFound,
    RegistryError,
    StoreUnavailable,
    TransactionError,
    ValidationError,
)
from app.models.registry_entry import (
    RegistryEntry,
    STATUS_ACTIVE,
    STATUS_CHECKED_OUT,
    STATUS_DELETED,
    STATUS_TRANSITIONS,
    VISITOR_NEW,
    VISITOR_TYPES,
)
from app.schemas.registry_entry import RegistryEntryCreate
from app.services.directory_service import get_department, get_division, get_public_user
from app.services.sequence_service import next_registry_id
from app.utils.logger import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = ("visitor_name", "visitor_nic", "department_id", "purpose_of_visit")
STAFF_ROLES = {"admin", "staff"}


def _rollback(db: Session):
    try:
        db.rollback()
    except SQLAlchemyError as e:
        logger.error(f"[REG] Rollback failed: {e}")


@contextmanager
def _unit_of_work(db: Session, failure_message: str):
    """
    Commit on success, roll back on any failure.
    IntegrityError is re-raised untouched so callers can decide to retry.
    """
    try:
        yield
        db.commit()
    except (RegistryError, IntegrityError):
        _rollback(db)
        raise
    except (OperationalError, InterfaceError) as e:
        _rollback(db)
        logger.error(f"[REG] Store unavailable: {e}")
        raise StoreUnavailable() from e
    except SQLAlchemyError as e:
        _rollback(db)
        logger.error(f"[REG] Transaction failed: {e}", exc_info=True)
        raise TransactionError(failure_message) from e
    except Exception:
        _rollback(db)
        raise


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _check_required(data: RegistryEntryCreate):
    missing = [name for name in REQUIRED_FIELDS if _is_blank(getattr(data, name))]
    if missing:
        logger.warning(f"[REG] Missing required fields: {', '.join(missing)}")
        raise ValidationError(f"Missing required fields: {', '.join(REQUIRED_FIELDS)}")


def _resolve_references(db: Session, data: RegistryEntryCreate):
    """Department must exist; division must belong to it; linked account must exist."""
    if get_department(db, data.department_id) is None:
        raise ValidationError(f"Department {data.department_id} does not exist")

    if data.division_id is not None:
        division = get_division(db, data.division_id)
        if division is None or division.department_id != data.department_id:
            raise ValidationError(
                f"Division {data.division_id} does not belong to department {data.department_id}"
            )

    if data.public_user_id is not None and get_public_user(db, data.public_user_id) is None:
        raise ValidationError(f"Public user {data.public_user_id} does not exist")


def _is_registry_id_conflict(exc: IntegrityError) -> bool:
    """Unique clash on registry_entries.registry_id or on the counter row seed."""
    detail = str(exc.orig)
    return "registry_id" in detail or "registry_sequences" in detail


def _creator_id(data: RegistryEntryCreate, principal: Optional[dict]) -> Optional[int]:
    if data.created_by is not None:
        return data.created_by
    if principal and principal.get("role") in STAFF_ROLES:
        return principal.get("user_id")
    return None


def create_registry_entry(db: Session, data: RegistryEntryCreate,
                          principal: Optional[dict] = None) -> RegistryEntry:
    """Validate and durably record a new visitor entry. Returns the committed row."""
    _check_required(data)

    visitor_type = data.visitor_type or VISITOR_NEW
    if visitor_type not in VISITOR_TYPES:
        raise ValidationError(f"visitor_type must be one of: {', '.join(VISITOR_TYPES)}")

    attempts = max(1, settings.REGISTRY_CREATE_MAX_RETRIES)
    reseed = False
    for attempt in range(1, attempts + 1):
        try:
            with _unit_of_work(db, "Failed to create registry entry"):
                _resolve_references(db, data)
                entry = RegistryEntry(
                    registry_id=next_registry_id(db, reseed=reseed),
                    public_user_id=data.public_user_id,
                    visitor_name=data.visitor_name.strip(),
                    visitor_nic=data.visitor_nic.strip(),
                    visitor_address=_clean(data.visitor_address),
                    visitor_phone=_clean(data.visitor_phone),
                    department_id=data.department_id,
                    division_id=data.division_id,
                    purpose_of_visit=data.purpose_of_visit.strip(),
                    remarks=_clean(data.remarks),
                    visitor_type=visitor_type,
                    status=STATUS_ACTIVE,
                    entry_time=datetime.now(),
                    created_by=_creator_id(data, principal),
                )
                db.add(entry)
                db.flush()
        except IntegrityError as e:
            if not _is_registry_id_conflict(e):
                logger.error(f"[REG] Integrity error while creating entry: {e.orig}")
                raise TransactionError("Failed to create registry entry") from e
            logger.warning(f"[REG] Registry ID conflict (attempt {attempt}/{attempts}): {e.orig}")
            reseed = True
            continue

        logger.info(f"[REG] Created {entry.registry_id} (id={entry.id}) "
                    f"dept={entry.department_id} type={entry.visitor_type}")
        return entry

    logger.error(f"[REG] Gave up after {attempts} registry ID conflicts")
    raise TransactionError("Could not allocate a unique registry ID, please retry")


def _change_status(db: Session, entry_id: int, new_status: str) -> RegistryEntry:
    try:
        with _unit_of_work(db, "Failed to update registry entry"):
            entry = (
                db.query(RegistryEntry)
                .filter(RegistryEntry.id == entry_id)
                .with_for_update()
                .first()
            )
            if entry is None:
                raise NotFound(f"Registry entry {entry_id} not found")
            if new_status not in STATUS_TRANSITIONS.get(entry.status, set()):
                raise InvalidStatusTransition(
                    f"Registry entry {entry.registry_id} is {entry.status} and cannot become {new_status}"
                )
            previous = entry.status
            entry.status = new_status
            entry.updated_at = datetime.now()
    except IntegrityError as e:
        raise TransactionError("Failed to update registry entry") from e

    logger.info(f"[REG] {entry.registry_id}: {previous} → {new_status}")
    return entry


def check_out_registry_entry(db: Session, entry_id: int) -> RegistryEntry:
    """Mark a visit as finished (active → checked_out)."""
    return _change_status(db, entry_id, STATUS_CHECKED_OUT)


def delete_registry_entry(db: Session, entry_id: int) -> RegistryEntry:
    """Soft delete. The row stays; its registry_id is never reused."""
    return _change_status(db, entry_id, STATUS_DELETED)
