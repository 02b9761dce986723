import logging
from sqlalchemy import or_
from sqlalchemy.orm import Session

from crud.audit_log import log_change
from crud.sequence import generate_customer_no
from exceptions import CustomerNotFound, DuplicateRecord
from models.customer import Customer
from schemas.customers import CustomerCreate, CustomerUpdate
from utils import sqlalchemy_to_dict

logger = logging.getLogger("customers")


def get_customer(db: Session, customer_id: int, include_deleted: bool = False):
    return db.query(Customer).filter(Customer.id == customer_id).execution_options(include_deleted=include_deleted).first()


def get_customer_or_404(db: Session, customer_id: int, include_deleted: bool = False) -> Customer:
    db_customer = get_customer(db, customer_id, include_deleted=include_deleted)
    if db_customer is None:
        raise CustomerNotFound(customer_id)
    return db_customer


def get_customers(db: Session, search: str = None, skip: int = 0, limit: int = 100):
    query = db.query(Customer)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Customer.applicant_name.ilike(pattern),
            Customer.customer_no.ilike(pattern),
            Customer.mobile_no.ilike(pattern),
        ))
    return query.order_by(Customer.id.desc()).offset(skip).limit(limit).all()


def _check_aadhaar_unique(db: Session, aadhaar_no: str, exclude_id: int = None):
    if not aadhaar_no:
        return
    query = db.query(Customer).filter(Customer.aadhaar_no == aadhaar_no).execution_options(include_deleted=True)
    if exclude_id is not None:
        query = query.filter(Customer.id != exclude_id)
    if query.first():
        raise DuplicateRecord(f"A customer with Aadhaar number {aadhaar_no} already exists")


def add_customer(db: Session, customer: CustomerCreate, user_identifier: str) -> Customer:
    """Insert a customer without committing, for use inside a larger write."""
    _check_aadhaar_unique(db, customer.aadhaar_no)
    db_customer = Customer(
        **customer.model_dump(),
        customer_no=generate_customer_no(db),
        created_by=user_identifier,
    )
    db.add(db_customer)
    db.flush()
    log_change(db, 'customers', db_customer.id, user_identifier, 'CREATE', new_obj=db_customer)
    return db_customer


def create_customer(db: Session, customer: CustomerCreate, user_identifier: str) -> Customer:
    try:
        db_customer = add_customer(db, customer, user_identifier)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_customer)
    logger.info(f"Customer {db_customer.customer_no} created by {user_identifier}")
    return db_customer


def update_customer(db: Session, customer_id: int, customer: CustomerUpdate, user_identifier: str) -> Customer:
    db_customer = get_customer_or_404(db, customer_id)
    update_data = customer.model_dump(exclude_unset=True)
    if update_data.get("aadhaar_no"):
        _check_aadhaar_unique(db, update_data["aadhaar_no"], exclude_id=customer_id)

    old_values = sqlalchemy_to_dict(db_customer)
    for key, value in update_data.items():
        setattr(db_customer, key, value)
    db_customer.updated_by = user_identifier
    try:
        db.flush()
        log_change(db, 'customers', customer_id, user_identifier, 'UPDATE', old_values, db_customer)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_customer)
    logger.info(f"Customer ID {customer_id} updated by {user_identifier}")
    return db_customer


def delete_customer(db: Session, customer_id: int, user_identifier: str):
    # Bookings keep pointing at the customer
    db_customer = get_customer_or_404(db, customer_id)
    old_values = sqlalchemy_to_dict(db_customer)
    db_customer.mark_deleted(user_identifier)
    try:
        log_change(db, 'customers', customer_id, user_identifier, 'DELETE', old_values, db_customer)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Customer ID {customer_id} soft deleted by {user_identifier}")
