import logging
from sqlalchemy.orm import Session

from crud.audit_log import log_change
from crud.bookings import soft_delete_booking_rows
from exceptions import LedgerValidationError, ProjectNotFound
from models.booking import Booking
from models.project import Project
from schemas.projects import ProjectCreate, ProjectUpdate
from utils import sqlalchemy_to_dict

logger = logging.getLogger("projects")


def get_project(db: Session, project_id: int, include_deleted: bool = False):
    return db.query(Project).filter(Project.id == project_id).execution_options(include_deleted=include_deleted).first()


def get_project_or_404(db: Session, project_id: int, include_deleted: bool = False) -> Project:
    db_project = get_project(db, project_id, include_deleted=include_deleted)
    if db_project is None:
        raise ProjectNotFound(project_id)
    return db_project


def _check_plot_counts(total_plots, available_plots):
    if available_plots is not None and total_plots is not None and available_plots > total_plots:
        raise LedgerValidationError("Available plots cannot exceed total plots")


def get_projects(db: Session, active_only: bool = False, skip: int = 0, limit: int = 100):
    query = db.query(Project)
    if active_only:
        query = query.filter(Project.is_active == True)
    return query.order_by(Project.name.asc()).offset(skip).limit(limit).all()


def create_project(db: Session, project: ProjectCreate, user_identifier: str) -> Project:
    data = project.model_dump()
    if data.get("available_plots") is None:
        data["available_plots"] = data["total_plots"]
    _check_plot_counts(data["total_plots"], data["available_plots"])
    db_project = Project(**data, created_by=user_identifier)
    db.add(db_project)
    try:
        db.flush()
        log_change(db, 'projects', db_project.id, user_identifier, 'CREATE', new_obj=db_project)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_project)
    logger.info(f"Project '{db_project.name}' (ID: {db_project.id}) created by {user_identifier}")
    return db_project


def update_project(db: Session, project_id: int, project: ProjectUpdate, user_identifier: str) -> Project:
    db_project = get_project_or_404(db, project_id)
    update_data = project.model_dump(exclude_unset=True)
    _check_plot_counts(
        update_data.get("total_plots", db_project.total_plots),
        update_data.get("available_plots", db_project.available_plots),
    )
    old_values = sqlalchemy_to_dict(db_project)
    for key, value in update_data.items():
        setattr(db_project, key, value)
    db_project.updated_by = user_identifier
    try:
        db.flush()
        log_change(db, 'projects', db_project.id, user_identifier, 'UPDATE', old_values, db_project)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_project)
    logger.info(f"Project ID {project_id} updated by {user_identifier}")
    return db_project


def delete_project(db: Session, project_id: int, user_identifier: str) -> int:
    """Soft delete a project, its bookings and their payments in one transaction.

    Returns the number of bookings that were cascaded.
    """
    db_project = get_project_or_404(db, project_id)
    try:
        old_values = sqlalchemy_to_dict(db_project)
        db_project.mark_deleted(user_identifier)

        bookings = db.query(Booking).filter(Booking.project_id == project_id).all()
        for db_booking in bookings:
            soft_delete_booking_rows(db, db_booking, user_identifier)

        log_change(db, 'projects', db_project.id, user_identifier, 'DELETE', old_values, db_project)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Project ID {project_id} soft deleted with {len(bookings)} bookings by {user_identifier}")
    return len(bookings)


def restore_project(db: Session, project_id: int, user_identifier: str) -> Project:
    """Un-delete the project row only; its bookings stay deleted."""
    db_project = get_project_or_404(db, project_id, include_deleted=True)
    if not db_project.is_deleted:
        return db_project
    db_project.mark_restored(user_identifier)
    try:
        log_change(db, 'projects', db_project.id, user_identifier, 'RESTORE', new_obj=db_project)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_project)
    logger.info(f"Project ID {project_id} restored by {user_identifier}")
    return db_project
