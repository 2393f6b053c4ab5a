"""
FastAPI endpoints for projects.

This module provides REST API endpoints for creating and listing projects and
for reading the functions and plugins stored for each of them.
"""

import logging
from datetime import datetime
from typing import List, Optional, Dict, Any
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from database import get_db, PROJECT_TYPES
from database import repository

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/api/projects", tags=["projects"])


# Request/Response Models
class CreateProjectRequest(BaseModel):
    """Request model for creating a new project."""
    name: Optional[str] = Field(None, description="Project name")
    description: Optional[str] = Field(None, description="Optional project description")
    url: Optional[str] = Field(None, description="Website URL to analyze")
    project_type: Optional[str] = Field("website", description="Either 'website' or 'codebase'")


class ProjectResponse(BaseModel):
    """Response model for project data."""
    id: int = Field(..., description="Unique project identifier")
    name: str = Field(..., description="Project name")
    description: Optional[str] = Field(None, description="Project description")
    url: Optional[str] = Field(None, description="Website URL")
    project_type: str = Field(..., description="Either 'website' or 'codebase'")
    status: str = Field(..., description="pending, analyzing, completed or failed")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class ProjectEnvelope(BaseModel):
    project: ProjectResponse


class ProjectListResponse(BaseModel):
    projects: List[ProjectResponse] = Field(..., description="Projects, newest first")


class FunctionMapResponse(BaseModel):
    """Response model for a stored function analysis."""
    id: int
    project_id: int
    function_name: str
    description: Optional[str] = None
    parameters: Dict[str, Any] = Field(default_factory=dict)
    return_type: Optional[str] = None
    file_path: Optional[str] = None
    line_number: Optional[int] = None
    complexity_score: Optional[int] = None
    ai_analysis: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


class FunctionMapListResponse(BaseModel):
    functions: List[FunctionMapResponse]


def parse_id(raw_id: str, label: str) -> int:
    """Parse a path identifier, answering 400 for anything non-numeric."""
    try:
        return int(raw_id)
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"Invalid {label} ID")


# API Endpoints
@router.get("", response_model=ProjectListResponse)
async def list_projects(db: Session = Depends(get_db)):
    """List all projects, newest first."""
    try:
        projects = repository.list_projects(db)
        logger.info(f"Retrieved {len(projects)} projects")
        return {"projects": [project.to_dict() for project in projects]}

    except SQLAlchemyError as e:
        logger.error(f"Database error listing projects: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch projects")


@router.post("", response_model=ProjectEnvelope)
async def create_project(
    request: CreateProjectRequest,
    db: Session = Depends(get_db)
):
    """
    Create a new project.

    New projects start in the 'pending' state until an analysis is run.
    """
    if not request.name or not request.name.strip():
        raise HTTPException(status_code=400, detail="Project name is required")

    project_type = request.project_type or "website"
    if project_type not in PROJECT_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid project type '{project_type}'. Must be one of: {', '.join(PROJECT_TYPES)}"
        )

    try:
        project = repository.create_project(
            db,
            name=request.name.strip(),
            project_type=project_type,
            description=request.description,
            url=request.url,
        )
        return {"project": project.to_dict()}

    except SQLAlchemyError as e:
        logger.error(f"Database error creating project: {str(e)}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to create project")


@router.get("/{project_id}", response_model=ProjectEnvelope)
async def get_project(project_id: str, db: Session = Depends(get_db)):
    """Get a specific project by ID."""
    pid = parse_id(project_id, "project")
    try:
        project = repository.get_project(db, pid)
        if not project:
            raise HTTPException(status_code=404, detail="Project not found")

        return {"project": project.to_dict()}

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Database error retrieving project {pid}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch project")


@router.get("/{project_id}/functions", response_model=FunctionMapListResponse)
async def get_project_functions(project_id: str, db: Session = Depends(get_db)):
    """
    Get the function maps stored for a project.

    Functions are ordered by name.
    """
    pid = parse_id(project_id, "project")
    try:
        functions = repository.get_function_maps_by_project(db, pid)
        logger.info(f"Retrieved {len(functions)} function maps for project {pid}")
        return {"functions": [function.to_dict() for function in functions]}

    except SQLAlchemyError as e:
        logger.error(f"Error fetching function maps for project {pid}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch function maps")


@router.get("/{project_id}/plugins")
async def get_project_plugins(project_id: str, db: Session = Depends(get_db)):
    """Get the active plugin configurations for a project, newest first."""
    pid = parse_id(project_id, "project")
    try:
        project = repository.get_project(db, pid)
        if not project:
            raise HTTPException(status_code=404, detail="Project not found")

        plugins = repository.get_active_plugin_configs(db, pid)
        return {
            "plugins": [
                repository.plugin_config_to_dict(plugin, project_name=project.name, include_code=False)
                for plugin in plugins
            ]
        }

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error fetching plugins for project {pid}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch plugins")
