from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ProjectBase(BaseModel):
    name: str = Field(..., min_length=1)
    location: Optional[str] = None
    description: Optional[str] = None
    legal_details: Optional[str] = None
    total_plots: int = Field(0, ge=0)
    available_plots: Optional[int] = Field(None, ge=0)
    is_active: bool = True


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = None
    description: Optional[str] = None
    legal_details: Optional[str] = None
    total_plots: Optional[int] = Field(None, ge=0)
    available_plots: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class Project(ProjectBase):
    id: int
    available_plots: int
    is_deleted: bool
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
