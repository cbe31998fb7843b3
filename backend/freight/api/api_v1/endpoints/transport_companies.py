"""
Transport company API
- profile CRUD
- fleet listing
"""
from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from freight.core.deps import get_db
from freight.models.enums import AccountStatus, Role
from freight.schemas.profile import (
    DriverResponse,
    FleetResponse,
    TransportCompanyCreate,
    TransportCompanyResponse,
    TransportCompanyUpdate)
from freight.services import profiles

router = APIRouter()


@router.get("/")
async def list_companies(
    *,
    db: AsyncSession = Depends(get_db),
    status: Optional[AccountStatus] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200)) -> Any:
    companies, total = await profiles.list_profiles(
        db, Role.TRANSPORT_COMPANY, status=status.value if status else None, skip=skip, limit=limit
    )
    return {
        "success": True,
        "data": [TransportCompanyResponse.model_validate(c) for c in companies],
        "total": total,
    }


@router.post("/")
async def create_company(
    *,
    db: AsyncSession = Depends(get_db),
    company_in: TransportCompanyCreate) -> Any:
    company = await profiles.create_profile(db, Role.TRANSPORT_COMPANY, company_in)
    return {
        "success": True,
        "id": company.id,
        "company": TransportCompanyResponse.model_validate(company),
    }


@router.get("/{company_id}")
async def get_company(
    *,
    db: AsyncSession = Depends(get_db),
    company_id: str) -> Any:
    company = await profiles.get_profile(db, Role.TRANSPORT_COMPANY, company_id)
    return {"success": True, "company": TransportCompanyResponse.model_validate(company)}


@router.put("/{company_id}")
async def update_company(
    *,
    db: AsyncSession = Depends(get_db),
    company_id: str,
    company_in: TransportCompanyUpdate) -> Any:
    company = await profiles.update_profile(db, Role.TRANSPORT_COMPANY, company_id, company_in)
    return {"success": True, "company": TransportCompanyResponse.model_validate(company)}


@router.get("/{company_id}/fleet")
async def list_fleet(
    *,
    db: AsyncSession = Depends(get_db),
    company_id: str) -> Any:
    """Drivers registered under the company"""
    drivers = await profiles.list_fleet(db, company_id)
    fleet = FleetResponse(
        company_id=company_id,
        data=[DriverResponse.model_validate(d) for d in drivers],
        total=len(drivers),
    )
    return {"success": True, **fleet.model_dump()}
