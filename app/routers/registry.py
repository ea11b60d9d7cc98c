# app/routers/registry.py
"""
Visitor registry endpoints.
GET  /registry  : today's active entries, filterable (no auth)
GET  /registry/{id}  : one entry (no auth)
POST /registry  : record a visit (bearer token)
PUT  /registry/{id}/check-out  : active → checked_out (bearer token)
DELETE /registry/{id}  : soft delete (bearer token)
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.registry_entry import STATUS_ACTIVE
from app.schemas.registry_entry import (
    RegistryCreatedResponse,
    RegistryEntryCreate,
    RegistryEntryResponse,
    RegistryListResponse,
    RegistryStatusResponse,
)
from app.services.registry_query_service import get_registry_entry, list_registry_entries
from app.services.registry_service import (
    check_out_registry_entry,
    create_registry_entry,
    delete_registry_entry,
)
from app.utils.auth import require_bearer_token

router = APIRouter()


@router.get("/registry", response_model=RegistryListResponse, summary="List registry entries")
def get_registry_entries(
    entry_date: Optional[date] = Query(None, alias="date", description="Defaults to today"),
    department_id: Optional[int] = None,
    search: Optional[str] = Query(None, description="Name, NIC or registry ID"),
    status: str = STATUS_ACTIVE,
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """Entries for one day, newest first. Only active entries unless status is given."""
    entries = list_registry_entries(
        db,
        entry_date=entry_date,
        department_id=department_id,
        search=search,
        status=status,
        limit=limit,
        offset=offset,
    )
    return {"status": "success", "message": "Registry entries retrieved successfully", "data": entries}


@router.get("/registry/{entry_id}", response_model=RegistryEntryResponse, summary="Get one registry entry")
def get_registry_entry_by_id(entry_id: int, db: Session = Depends(get_db)):
    entry = get_registry_entry(db, entry_id)
    return {"status": "success", "message": "Registry entry retrieved successfully", "data": entry}


@router.post("/registry", response_model=RegistryCreatedResponse, summary="Record a visitor entry")
def post_registry_entry(
    body: RegistryEntryCreate,
    principal: dict = Depends(require_bearer_token),
    db: Session = Depends(get_db),
):
    """Generates the next REG ID and stores the entry as active."""
    entry = create_registry_entry(db, body, principal=principal)
    return {
        "status": "success",
        "message": "Registry entry created successfully",
        "data": {"id": entry.id, "registry_id": entry.registry_id},
    }


@router.put("/registry/{entry_id}/check-out", response_model=RegistryStatusResponse,
            summary="Check a visitor out")
def put_registry_check_out(
    entry_id: int,
    principal: dict = Depends(require_bearer_token),
    db: Session = Depends(get_db),
):
    entry = check_out_registry_entry(db, entry_id)
    return {
        "status": "success",
        "message": "Visitor checked out",
        "data": {"id": entry.id, "registry_id": entry.registry_id, "status": entry.status},
    }


@router.delete("/registry/{entry_id}", response_model=RegistryStatusResponse,
               summary="Soft delete a registry entry")
def delete_registry_entry_by_id(
    entry_id: int,
    principal: dict = Depends(require_bearer_token),
    db: Session = Depends(get_db),
):
    """The entry is marked deleted; its registry ID is never reused."""
    entry = delete_registry_entry(db, entry_id)
    return {
        "status": "success",
        "message": "Registry entry deleted",
        "data": {"id": entry.id, "registry_id": entry.registry_id, "status": entry.status},
    }
