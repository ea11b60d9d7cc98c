# app/schemas/registry_entry.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional, List, Literal


class RegistryEntryCreate(BaseModel):
    # Mandatory fields are checked by registry_service so that missing and
    # blank values produce the same 400 message.
    visitor_name: Optional[str] = None
    visitor_nic: Optional[str] = None
    department_id: Optional[int] = None
    purpose_of_visit: Optional[str] = None
    visitor_address: Optional[str] = None
    visitor_phone: Optional[str] = None
    division_id: Optional[int] = None
    remarks: Optional[str] = None
    visitor_type: Optional[Literal["new", "existing"]] = None
    public_user_id: Optional[int] = None
    created_by: Optional[int] = None


class RegistryEntryOut(BaseModel):
    id: int
    registry_id: str
    public_user_id: Optional[int] = None
    public_id: Optional[str] = None
    public_user_name: Optional[str] = None
    visitor_name: str
    visitor_nic: str
    visitor_address: Optional[str] = None
    visitor_phone: Optional[str] = None
    department_id: int
    department_name: Optional[str] = None
    division_id: Optional[int] = None
    division_name: Optional[str] = None
    purpose_of_visit: str
    remarks: Optional[str] = None
    visitor_type: str
    status: str
    entry_time: datetime
    created_by: Optional[int] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RegistryCreatedOut(BaseModel):
    id: int
    registry_id: str


class RegistryStatusOut(BaseModel):
    id: int
    registry_id: str
    status: str


class RegistryListResponse(BaseModel):
    status: str = "success"
    message: str
    data: List[RegistryEntryOut]


class RegistryEntryResponse(BaseModel):
    status: str = "success"
    message: str
    data: RegistryEntryOut


class RegistryCreatedResponse(BaseModel):
    status: str = "success"
    message: str
    data: RegistryCreatedOut


class RegistryStatusResponse(BaseModel):
    status: str = "success"
    message: str
    data: RegistryStatusOut
