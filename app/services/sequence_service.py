# app/services/sequence_service.py
"""
Registry ID generation: REG + 5-digit zero-padded counter (REG00001).

The counter lives in the registry_sequences table. next_registry_id() locks
that row (SELECT ... FOR UPDATE, or BEGIN IMMEDIATE on SQLite) inside the
caller's transaction, so the ID assignment and the entry insert commit or
roll back together. A rolled-back creation therefore leaves no gap, and two
concurrent creators can never read the same value.
"""

import re
from typing import Optional

from sqlalchemy import Integer, cast, func
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import StoreUnavailable
from app.models.registry_entry import RegistryEntry
from app.models.registry_sequence import RegistrySequence
from app.utils.logger import get_logger

logger = get_logger(__name__)

REGISTRY_SEQUENCE = "registry_id"


def format_registry_id(number: int) -> str:
    return f"{settings.REGISTRY_ID_PREFIX}{number:0{settings.REGISTRY_ID_WIDTH}d}"


def parse_registry_number(registry_id: str) -> Optional[int]:
    """Numeric suffix of a registry ID, or None if it is not a REG token."""
    if not registry_id:
        return None
    match = re.fullmatch(re.escape(settings.REGISTRY_ID_PREFIX) + r"(\d+)", registry_id)
    return int(match.group(1)) if match else None


def highest_registry_number(db: Session) -> int:
    """
    Highest numeric suffix among existing REG IDs, 0 if there are none.
    Compared as integers, so REG00099 < REG00100 holds.
    """
    prefix = settings.REGISTRY_ID_PREFIX
    suffix = func.substr(RegistryEntry.registry_id, len(prefix) + 1)
    highest = (
        db.query(func.max(cast(suffix, Integer)))
        .filter(RegistryEntry.registry_id.like(f"{prefix}%"))
        .scalar()
    )
    return int(highest or 0)


def next_registry_id(db: Session, reseed: bool = False) -> str:
    """
    Reserve and return the next registry ID within the current transaction.
    Must be followed by the insert and commit in the same session.

    reseed=True first lifts the counter to the highest stored REG number,
    for when rows were written without going through the counter.
    """
    try:
        counter = (
            db.query(RegistrySequence)
            .filter(RegistrySequence.name == REGISTRY_SEQUENCE)
            .with_for_update()
            .first()
        )
        if counter is None:
            # First use: continue from whatever entries already exist.
            # A concurrent seed surfaces as IntegrityError on flush.
            counter = RegistrySequence(name=REGISTRY_SEQUENCE,
                                       last_value=highest_registry_number(db))
            db.add(counter)
            db.flush()
            logger.info(f"[SEQ] Seeded {REGISTRY_SEQUENCE} counter at {counter.last_value}")
        elif reseed:
            highest = highest_registry_number(db)
            if highest > counter.last_value:
                logger.warning(f"[SEQ] {REGISTRY_SEQUENCE} counter behind stored rows: "
                               f"{counter.last_value} → {highest}")
                counter.last_value = highest

        counter.last_value += 1
        db.flush()
    except (OperationalError, InterfaceError) as e:
        logger.error(f"[SEQ] Store unavailable while generating registry ID: {e}")
        raise StoreUnavailable() from e

    registry_id = format_registry_id(counter.last_value)
    logger.debug(f"[SEQ] Generated registry ID {registry_id}")
    return registry_id
