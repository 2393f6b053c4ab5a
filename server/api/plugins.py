"""
FastAPI endpoints for browser plugin generation.

This module provides REST API endpoints for generating plugins from a project's
analyzed functions, and for previewing, downloading, toggling and deleting the
stored plugin configurations.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from database import get_db
from database import repository
from plugin_generator import PluginGenerator, plugin_filename
from .projects import parse_id

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/api", tags=["plugins"])

UNEMBEDDABLE_NAME_TOKENS = ("*/", "\n", "\r")


# Request/Response Models
class GeneratePluginRequest(BaseModel):
    """Request model for generating a plugin."""
    model_config = ConfigDict(populate_by_name=True)

    project_id: Optional[int] = Field(None, alias="projectId", description="Project to generate the plugin for")
    plugin_name: Optional[str] = Field(None, alias="pluginName", description="Name of the plugin configuration")
    features: Optional[List[str]] = Field(
        None,
        description="Optional features: visual-indicator, performance-monitoring, error-tracking"
    )


class GeneratePluginResponse(BaseModel):
    """Response model for a generated plugin."""
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., description="Status message")
    plugin_id: int = Field(..., alias="pluginId", description="Stored plugin configuration ID")
    download_url: str = Field(..., alias="downloadUrl", description="Where to download the script")


class UpdatePluginRequest(BaseModel):
    """Request model for activating or deactivating a plugin."""
    model_config = ConfigDict(populate_by_name=True)

    is_active: Optional[bool] = Field(None, alias="isActive", description="Whether the plugin counts as generated")


class PluginPreviewResponse(BaseModel):
    """Response model for previewing plugin code."""
    id: int
    name: str
    version: str
    code: str
    created_at: datetime


def _download_url(plugin_id: int) -> str:
    return f"/api/plugin/download/{plugin_id}"


# API Endpoints
@router.post("/plugin/generate", response_model=GeneratePluginResponse)
async def generate_plugin(
    request: GeneratePluginRequest,
    db: Session = Depends(get_db)
):
    """
    Generate a plugin for a project and store it.

    Uses the basic template when no features are requested and the advanced
    template otherwise. The stored version matches the template's version.
    """
    if not request.project_id or not request.plugin_name:
        raise HTTPException(status_code=400, detail="Project ID and plugin name are required")

    # The name is embedded verbatim in the plugin's header comment.
    if any(token in request.plugin_name for token in UNEMBEDDABLE_NAME_TOKENS):
        raise HTTPException(
            status_code=400,
            detail="Plugin name must not contain '*/' or line breaks"
        )

    features = request.features or []

    try:
        project = repository.get_project(db, request.project_id)
        if not project:
            raise HTTPException(status_code=404, detail="Project not found")

        functions = repository.get_function_maps_by_project(db, project.id)

        version = PluginGenerator.template_version(features)
        plugin_code = PluginGenerator.generate_plugin(
            project.to_dict(),
            [function.to_dict() for function in functions],
            features,
            plugin_name=request.plugin_name,
            generated_at=datetime.now(timezone.utc),
        )

        plugin_config = repository.create_plugin_config(
            db,
            project_id=project.id,
            config_name=request.plugin_name,
            plugin_code=plugin_code,
            version=version,
            is_active=True,
        )

        logger.info(
            f"Generated plugin {plugin_config.id} for project {project.id} "
            f"({len(functions)} functions, features={features})"
        )

        return GeneratePluginResponse(
            message="Plugin generated successfully",
            plugin_id=plugin_config.id,
            download_url=_download_url(plugin_config.id),
        )

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Database error generating plugin: {str(e)}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to generate plugin")
    except Exception as e:
        logger.error(f"Error generating plugin: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to generate plugin")


@router.get("/plugin/download/{plugin_id}")
async def download_plugin(plugin_id: str, db: Session = Depends(get_db)):
    """
    Download the plugin code as a JavaScript file.

    The filename is ``<config name>_v<version>.js`` with every
    non-alphanumeric character replaced by an underscore.
    """
    pid = parse_id(plugin_id, "plugin")
    try:
        plugin_config = repository.get_plugin_config(db, pid)
        if not plugin_config:
            raise HTTPException(status_code=404, detail="Plugin not found")

        filename = plugin_filename(plugin_config.config_name, plugin_config.version)
        logger.info(f"Serving plugin {pid} as {filename}")

        return Response(
            content=plugin_config.plugin_code,
            media_type="application/javascript",
            headers={
                "Content-Disposition": f'attachment; filename="{filename}"',
                "Cache-Control": "no-cache",
            },
        )

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error downloading plugin {pid}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to download plugin")


@router.get("/plugin/preview/{plugin_id}", response_model=PluginPreviewResponse)
async def preview_plugin(plugin_id: str, db: Session = Depends(get_db)):
    """Return a plugin's code and metadata for display."""
    pid = parse_id(plugin_id, "plugin")
    try:
        plugin_config = repository.get_plugin_config(db, pid)
        if not plugin_config:
            raise HTTPException(status_code=404, detail="Plugin not found")

        return PluginPreviewResponse(
            id=plugin_config.id,
            name=plugin_config.config_name,
            version=plugin_config.version,
            code=plugin_config.plugin_code,
            created_at=plugin_config.created_at,
        )

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error previewing plugin {pid}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to preview plugin")


@router.patch("/plugin/{plugin_id}")
async def update_plugin(
    plugin_id: str,
    request: UpdatePluginRequest,
    db: Session = Depends(get_db)
):
    """
    Activate or deactivate a plugin.

    Only the active flag can change; name and version are baked into the code.
    """
    pid = parse_id(plugin_id, "plugin")
    if request.is_active is None:
        raise HTTPException(status_code=400, detail="isActive is required")

    try:
        plugin_config = repository.set_plugin_active(db, pid, request.is_active)
        if not plugin_config:
            raise HTTPException(status_code=404, detail="Plugin not found")

        logger.info(f"Plugin {pid} active -> {plugin_config.is_active}")
        return {"plugin": repository.plugin_config_to_dict(plugin_config, include_code=False)}

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Database error updating plugin {pid}: {str(e)}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to update plugin")


@router.delete("/plugin/{plugin_id}")
async def delete_plugin(plugin_id: str, db: Session = Depends(get_db)):
    """Permanently remove a plugin configuration."""
    pid = parse_id(plugin_id, "plugin")
    try:
        if not repository.delete_plugin_config(db, pid):
            raise HTTPException(status_code=404, detail="Plugin not found")

        return {
            "id": pid,
            "status": "deleted",
            "message": "Plugin deleted successfully"
        }

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Database error deleting plugin {pid}: {str(e)}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to delete plugin")


@router.get("/plugins")
async def list_plugins(db: Session = Depends(get_db)):
    """List every plugin configuration with its project's name, newest first."""
    try:
        plugins = repository.list_plugin_configs(db)
        logger.info(f"Retrieved {len(plugins)} plugin configs")
        return {"plugins": plugins}

    except SQLAlchemyError as e:
        logger.error(f"Error fetching plugins: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch plugins")
