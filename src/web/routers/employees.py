"""
Employee Routes

Listing is open to every member of the organization; adding employees
requires the ADMIN role.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from rbac import TokenClaims, require_admin, require_auth
from services.employee_service import EmployeeService
from web.dependencies import get_employee_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/employees", tags=["Employees"])


class CreateEmployeeRequest(BaseModel):
    """Request to add an employee."""
    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    role: str = Field(..., min_length=2, max_length=100)
    department: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    wallet_address: Optional[str] = None


@router.get("")
async def list_employees(
    claims: TokenClaims = Depends(require_auth),
    service: EmployeeService = Depends(get_employee_service),
):
    employees = await service.list_employees(claims.org_id)
    return {"success": True, "data": [e.to_dict() for e in employees]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_employee(
    request: CreateEmployeeRequest,
    claims: TokenClaims = Depends(require_admin),
    service: EmployeeService = Depends(get_employee_service),
):
    """Add an employee to the caller's organization."""
    employee = await service.add_employee(
        org_id=claims.org_id,
        name=request.name,
        email=str(request.email),
        role=request.role,
        department=request.department,
        skills=request.skills,
        wallet_address=request.wallet_address,
    )
    return {"success": True, "data": employee.to_dict()}
