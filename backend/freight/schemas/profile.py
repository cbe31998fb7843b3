"""
Profile schemas for traders, drivers and transport companies
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, EmailStr

from freight.models.enums import AccountStatus, VehicleType, TrailerType
from freight.schemas.common import TrailerLengthField


class TraderBase(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    company_name: Optional[str] = Field(None, max_length=100)
    license: Optional[str] = Field(None, max_length=50, description="Trade license number")
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, max_length=200)


class TraderCreate(TraderBase):
    pass


class TraderUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    company_name: Optional[str] = Field(None, max_length=100)
    license: Optional[str] = Field(None, max_length=50)
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, max_length=200)


class TraderResponse(TraderBase):
    id: str
    status: str
    photo_url: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class DriverBase(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    mobile: Optional[str] = Field(None, max_length=30)
    email: Optional[EmailStr] = None
    passport: Optional[str] = Field(None, max_length=50)
    vehicle_reg: Optional[str] = Field(None, max_length=30, description="Registration plate")
    vehicle_cat: Optional[VehicleType] = None
    trailer_length: TrailerLengthField = None
    trailer_type: Optional[TrailerType] = None
    company_id: Optional[str] = Field(None, description="Owning transport company, empty for independents")
    # uploaded document URLs
    passport_url: Optional[str] = None
    id_front_url: Optional[str] = None
    id_back_url: Optional[str] = None
    license_front_url: Optional[str] = None
    license_back_url: Optional[str] = None
    mulkia_front_url: Optional[str] = None
    mulkia_back_url: Optional[str] = None


class DriverCreate(DriverBase):
    pass


class DriverUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    mobile: Optional[str] = Field(None, max_length=30)
    email: Optional[EmailStr] = None
    passport: Optional[str] = Field(None, max_length=50)
    vehicle_reg: Optional[str] = Field(None, max_length=30)
    vehicle_cat: Optional[VehicleType] = None
    trailer_length: TrailerLengthField = None
    trailer_type: Optional[TrailerType] = None
    passport_url: Optional[str] = None
    id_front_url: Optional[str] = None
    id_back_url: Optional[str] = None
    license_front_url: Optional[str] = None
    license_back_url: Optional[str] = None
    mulkia_front_url: Optional[str] = None
    mulkia_back_url: Optional[str] = None


class DriverResponse(DriverBase):
    id: str
    status: str
    photo_url: Optional[str] = None
    current_lat: Optional[float] = None
    current_lng: Optional[float] = None
    location_updated_at: Optional[datetime] = None
    created_at: datetime

    # stored as plain strings
    vehicle_cat: Optional[str] = None
    trailer_length: Optional[str] = None
    trailer_type: Optional[str] = None

    class Config:
        from_attributes = True


class TransportCompanyBase(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=100)
    trn_number: Optional[str] = Field(None, max_length=50, description="Tax registration number")
    email: Optional[EmailStr] = None


class TransportCompanyCreate(TransportCompanyBase):
    pass


class TransportCompanyUpdate(BaseModel):
    company_name: Optional[str] = Field(None, min_length=1, max_length=100)
    trn_number: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None


class TransportCompanyResponse(TransportCompanyBase):
    id: str
    status: str
    photo_url: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class StatusUpdate(BaseModel):
    status: AccountStatus


class LocationUpdate(BaseModel):
    """Driver position report"""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class PhotoUrlUpdate(BaseModel):
    photo_url: str = Field(..., min_length=1, max_length=500)


class FleetResponse(BaseModel):
    company_id: str
    data: List[DriverResponse]
    total: int
