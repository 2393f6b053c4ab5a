"""
Query helpers for projects, function maps and plugin configurations.

Writes commit their own transaction unless called with ``commit=False``;
callers roll back the session on SQLAlchemyError.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from .models import FunctionMap, PluginConfig, Project, PROJECT_STATUSES

logger = logging.getLogger(__name__)

ACTIVITY_TYPES_BY_STATUS = {
    "completed": "analysis_completed",
    "analyzing": "analysis_started",
    "failed": "analysis_failed",
}


# Project operations
def create_project(
    db: Session,
    name: str,
    project_type: str,
    description: Optional[str] = None,
    url: Optional[str] = None,
    status: str = "pending",
) -> Project:
    project = Project(
        name=name,
        description=description or None,
        url=url or None,
        project_type=project_type,
        status=status,
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    logger.info(f"Created project {project.id} ({project.project_type}): {project.name}")
    return project


def get_project(db: Session, project_id: int) -> Optional[Project]:
    return db.query(Project).filter(Project.id == project_id).first()


def list_projects(db: Session) -> List[Project]:
    return db.query(Project).order_by(Project.created_at.desc(), Project.id.desc()).all()


def update_project_status(db: Session, project_id: int, status: str) -> None:
    """Move a project through pending -> analyzing -> completed | failed."""
    if status not in PROJECT_STATUSES:
        raise ValueError(f"Invalid project status '{status}'. Must be one of: {PROJECT_STATUSES}")

    project = get_project(db, project_id)
    if project is None:
        logger.warning(f"Status update for unknown project {project_id} ignored")
        return

    project.status = status
    db.commit()
    logger.info(f"Project {project_id} status -> {status}")


# Function map operations
def create_function_map(
    db: Session,
    project_id: int,
    function_name: str,
    description: Optional[str] = None,
    parameters: Optional[Dict[str, str]] = None,
    return_type: Optional[str] = None,
    file_path: Optional[str] = None,
    line_number: Optional[int] = None,
    complexity_score: Optional[int] = None,
    ai_analysis: Optional[Dict[str, Any]] = None,
    commit: bool = True,
) -> FunctionMap:
    """
    Store one analyzed function.

    With ``commit=False`` the row is only flushed, so a caller storing a whole
    analysis can commit once and roll every row back on failure.
    """
    function_map = FunctionMap(
        project_id=project_id,
        function_name=function_name,
        description=description,
        return_type=return_type,
        file_path=file_path,
        line_number=line_number,
        complexity_score=complexity_score,
    )
    function_map.parameters = parameters
    function_map.ai_analysis = ai_analysis

    db.add(function_map)
    if not commit:
        db.flush()
        return function_map

    db.commit()
    db.refresh(function_map)
    return function_map


def get_function_maps_by_project(db: Session, project_id: int) -> List[FunctionMap]:
    return (
        db.query(FunctionMap)
        .filter(FunctionMap.project_id == project_id)
        .order_by(FunctionMap.function_name, FunctionMap.id)
        .all()
    )


# Plugin config operations
def create_plugin_config(
    db: Session,
    project_id: int,
    config_name: str,
    plugin_code: str,
    version: str,
    is_active: bool = True,
) -> PluginConfig:
    plugin_config = PluginConfig(
        project_id=project_id,
        config_name=config_name,
        plugin_code=plugin_code,
        version=version,
        is_active=is_active,
    )
    db.add(plugin_config)
    db.commit()
    db.refresh(plugin_config)
    logger.info(f"Stored plugin config {plugin_config.id} for project {project_id}: {config_name} v{version}")
    return plugin_config


def get_plugin_config(db: Session, plugin_id: int) -> Optional[PluginConfig]:
    return db.query(PluginConfig).filter(PluginConfig.id == plugin_id).first()


def list_plugin_configs(db: Session) -> List[Dict[str, Any]]:
    """All plugin configs joined with the owning project's name, newest first."""
    rows = (
        db.query(PluginConfig, Project.name)
        .join(Project, PluginConfig.project_id == Project.id)
        .order_by(PluginConfig.created_at.desc(), PluginConfig.id.desc())
        .all()
    )
    return [plugin_config_to_dict(config, project_name=project_name) for config, project_name in rows]


def get_active_plugin_configs(db: Session, project_id: int) -> List[PluginConfig]:
    return (
        db.query(PluginConfig)
        .filter(PluginConfig.project_id == project_id, PluginConfig.is_active.is_(True))
        .order_by(PluginConfig.created_at.desc(), PluginConfig.id.desc())
        .all()
    )


def set_plugin_active(db: Session, plugin_id: int, is_active: bool) -> Optional[PluginConfig]:
    """Toggle whether a plugin counts as generated; the code itself never changes."""
    plugin_config = get_plugin_config(db, plugin_id)
    if plugin_config is None:
        return None

    plugin_config.is_active = is_active
    db.commit()
    db.refresh(plugin_config)
    return plugin_config


def delete_plugin_config(db: Session, plugin_id: int) -> bool:
    plugin_config = get_plugin_config(db, plugin_id)
    if plugin_config is None:
        return False

    db.delete(plugin_config)
    db.commit()
    logger.info(f"Deleted plugin config {plugin_id}")
    return True


def plugin_config_to_dict(
    plugin_config: PluginConfig,
    project_name: Optional[str] = None,
    include_code: bool = True,
) -> Dict[str, Any]:
    data = {
        "id": plugin_config.id,
        "project_id": plugin_config.project_id,
        "config_name": plugin_config.config_name,
        "version": plugin_config.version,
        "is_active": plugin_config.is_active,
        "created_at": plugin_config.created_at,
        "updated_at": plugin_config.updated_at,
    }
    if include_code:
        data["plugin_code"] = plugin_config.plugin_code
    if project_name is not None:
        data["project_name"] = project_name
    return data


# Dashboard aggregates
def get_project_stats(db: Session) -> Dict[str, int]:
    total_projects = db.query(func.count(Project.id)).scalar() or 0
    completed_analyses = (
        db.query(func.count(Project.id)).filter(Project.status == "completed").scalar() or 0
    )
    functions_analyzed = db.query(func.count(FunctionMap.id)).scalar() or 0
    plugins_generated = (
        db.query(func.count(PluginConfig.id)).filter(PluginConfig.is_active.is_(True)).scalar() or 0
    )

    return {
        "totalProjects": int(total_projects),
        "completedAnalyses": int(completed_analyses),
        "functionsAnalyzed": int(functions_analyzed),
        "pluginsGenerated": int(plugins_generated),
    }


def get_recent_activity(
    db: Session,
    limit: int = 10,
    window_days: int = 7,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """
    Build the dashboard activity feed.

    Project events are typed by the project's current status and plugin events
    come from generated configs. Both are restricted to the last ``window_days``
    days and merged newest first.

    Args:
        db: Database session
        limit: Maximum number of events returned
        window_days: How far back to look
        now: Reference time (UTC, naive); defaults to the current time

    Returns:
        List of activity dictionaries
    """
    # Columns hold naive UTC timestamps.
    reference = now or datetime.now(timezone.utc).replace(tzinfo=None)
    cutoff = reference - timedelta(days=window_days)
    activities: List[Dict[str, Any]] = []

    function_counts = dict(
        db.query(FunctionMap.project_id, func.count(FunctionMap.id))
        .group_by(FunctionMap.project_id)
        .all()
    )

    projects = db.query(Project).filter(Project.updated_at >= cutoff).all()
    for project in projects:
        details = None
        if project.status == "completed":
            details = f"Found {function_counts.get(project.id, 0)} functions"
        activities.append({
            "id": f"project_{project.id}",
            "type": ACTIVITY_TYPES_BY_STATUS.get(project.status, "project_created"),
            "project_name": project.name,
            "timestamp": project.updated_at,
            "details": details,
        })

    plugin_rows = (
        db.query(PluginConfig, Project.name)
        .join(Project, PluginConfig.project_id == Project.id)
        .filter(PluginConfig.created_at >= cutoff)
        .all()
    )
    for plugin_config, project_name in plugin_rows:
        activities.append({
            "id": f"plugin_{plugin_config.id}",
            "type": "plugin_generated",
            "project_name": project_name,
            "timestamp": plugin_config.created_at,
            "details": f"{plugin_config.config_name} v{plugin_config.version}",
        })

    activities.sort(key=lambda activity: activity["timestamp"], reverse=True)
    return activities[:limit]
