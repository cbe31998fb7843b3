"""
Account profiles: traders, drivers, transport companies

Status carries both the approval state (Pending/Active/Warned/Rejected)
and, for drivers and companies, the availability state
(Available/Busy/On-Trip/Offline).
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Float

from freight.db.base import Base, new_id
from freight.models.enums import AccountStatus


class Trader(Base):
    """Cargo owner placing orders"""
    __tablename__ = "traders"

    id = Column(String(32), primary_key=True, default=new_id)
    full_name = Column(String(100), nullable=False)
    company_name = Column(String(100))
    license = Column(String(50), comment="Trade license number")
    phone = Column(String(30))
    email = Column(String(100), index=True)
    address = Column(String(200))
    status = Column(String(20), nullable=False, default=AccountStatus.PENDING.value, index=True)
    photo_url = Column(String(500))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Trader {self.full_name}>"

    @property
    def display_name(self) -> str:
        return self.full_name


class TransportCompany(Base):
    """Fleet operator; accepts orders on behalf of its drivers"""
    __tablename__ = "transport_companies"

    id = Column(String(32), primary_key=True, default=new_id)
    company_name = Column(String(100), nullable=False)
    trn_number = Column(String(50), comment="Tax registration number")
    email = Column(String(100), index=True)
    status = Column(String(20), nullable=False, default=AccountStatus.PENDING.value, index=True)
    photo_url = Column(String(500))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<TransportCompany {self.company_name}>"

    @property
    def display_name(self) -> str:
        return self.company_name


class Driver(Base):
    """Driver, either independent or part of a company fleet"""
    __tablename__ = "drivers"

    id = Column(String(32), primary_key=True, default=new_id)
    full_name = Column(String(100), nullable=False)
    mobile = Column(String(30))
    email = Column(String(100), index=True)
    passport = Column(String(50))

    # vehicle
    vehicle_reg = Column(String(30), comment="Vehicle registration plate")
    vehicle_cat = Column(String(20), index=True, comment="Vehicle category")
    trailer_length = Column(String(10))
    trailer_type = Column(String(20))

    status = Column(String(20), nullable=False, default=AccountStatus.PENDING.value, index=True)
    # NULL for independent drivers
    company_id = Column(String(32), index=True, comment="Owning transport company")

    # documents
    photo_url = Column(String(500))
    passport_url = Column(String(500))
    id_front_url = Column(String(500))
    id_back_url = Column(String(500))
    license_front_url = Column(String(500))
    license_back_url = Column(String(500))
    mulkia_front_url = Column(String(500))
    mulkia_back_url = Column(String(500))

    # last reported position
    current_lat = Column(Float)
    current_lng = Column(Float)
    location_updated_at = Column(DateTime)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Driver {self.full_name} ({self.vehicle_cat})>"

    @property
    def display_name(self) -> str:
        return self.full_name

    @property
    def is_company_driver(self) -> bool:
        return self.company_id is not None
