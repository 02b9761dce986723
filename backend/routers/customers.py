from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
import crud.customers as crud_customers
from schemas.customers import Customer, CustomerCreate, CustomerUpdate
from utils.auth_utils import ADMIN_ROLES, ALL_ROLES, WRITE_ROLES, get_user_identifier, require_role

router = APIRouter(prefix="/customers", tags=["Customers"])
logger = logging.getLogger("customers")


@router.post("/", response_model=Customer, status_code=status.HTTP_201_CREATED)
def create_customer(
    customer: CustomerCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(WRITE_ROLES)),
):
    return crud_customers.create_customer(db, customer, get_user_identifier(user))


@router.get("/", response_model=List[Customer])
def list_customers(
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ALL_ROLES)),
):
    """List customers, optionally matching name, mobile or customer number."""
    return crud_customers.get_customers(db, search=search, skip=skip, limit=limit)


@router.get("/{customer_id}", response_model=Customer)
def read_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ALL_ROLES)),
):
    return crud_customers.get_customer_or_404(db, customer_id)


@router.patch("/{customer_id}", response_model=Customer)
def update_customer(
    customer_id: int,
    customer: CustomerUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(WRITE_ROLES)),
):
    return crud_customers.update_customer(db, customer_id, customer, get_user_identifier(user))


@router.delete("/{customer_id}")
def delete_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ADMIN_ROLES)),
):
    crud_customers.delete_customer(db, customer_id, get_user_identifier(user))
    return {"message": "Customer deleted successfully"}
