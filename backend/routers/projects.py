from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
import logging

from database import get_db
import crud.projects as crud_projects
from schemas.projects import Project, ProjectCreate, ProjectUpdate
from utils.auth_utils import ADMIN_ROLES, ALL_ROLES, get_user_identifier, require_role

router = APIRouter(prefix="/projects", tags=["Projects"])
logger = logging.getLogger("projects")


@router.post("/", response_model=Project, status_code=status.HTTP_201_CREATED)
def create_project(
    project: ProjectCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ADMIN_ROLES)),
):
    return crud_projects.create_project(db, project, get_user_identifier(user))


@router.get("/", response_model=List[Project])
def list_projects(
    active_only: bool = False,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ALL_ROLES)),
):
    return crud_projects.get_projects(db, active_only=active_only, skip=skip, limit=limit)


@router.get("/{project_id}", response_model=Project)
def read_project(
    project_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ALL_ROLES)),
):
    return crud_projects.get_project_or_404(db, project_id)


@router.patch("/{project_id}", response_model=Project)
def update_project(
    project_id: int,
    project: ProjectUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ADMIN_ROLES)),
):
    return crud_projects.update_project(db, project_id, project, get_user_identifier(user))


@router.delete("/{project_id}")
def delete_project(
    project_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ADMIN_ROLES)),
):
    """Soft delete a project together with its bookings and their payments."""
    booking_count = crud_projects.delete_project(db, project_id, get_user_identifier(user))
    return {"message": "Project deleted successfully", "bookings_deleted": booking_count}


@router.post("/{project_id}/restore", response_model=Project)
def restore_project(
    project_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ADMIN_ROLES)),
):
    return crud_projects.restore_project(db, project_id, get_user_identifier(user))
