"""
Database models for the AI Learning Service.

Projects under analysis, the functions discovered in them, and the
browser plugins generated from those functions.
"""

import json
import logging
from typing import Any, Dict, Optional

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

logger = logging.getLogger(__name__)

# Create declarative base
Base = declarative_base()

PROJECT_TYPES = ("website", "codebase")
PROJECT_STATUSES = ("pending", "analyzing", "completed", "failed")


def _dump_json(value: Any) -> Optional[str]:
    """Serialize a structured column value, keeping None as NULL."""
    if value is None:
        return None
    return json.dumps(value)


def _load_json(raw: Optional[str], default: Any) -> Any:
    if not raw:
        return default
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning(f"Could not decode stored JSON column: {e}")
        return default


class Project(Base):
    """A website or codebase tracked through the analysis lifecycle."""
    __tablename__ = 'projects'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    url = Column(String(2048), nullable=True)
    project_type = Column(String(20), nullable=False, default='website')
    status = Column(String(20), nullable=False, default='pending')

    # Timestamps
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    function_maps = relationship(
        "FunctionMap", back_populates="project", cascade="all, delete-orphan"
    )
    plugin_configs = relationship(
        "PluginConfig", back_populates="project", cascade="all, delete-orphan"
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "url": self.url,
            "project_type": self.project_type,
            "status": self.status,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def __repr__(self):
        return f"<Project(id={self.id}, name={self.name}, status={self.status})>"


class FunctionMap(Base):
    """One AI-derived description of a function found in a project."""
    __tablename__ = 'function_maps'

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey('projects.id', ondelete='CASCADE'), nullable=False, index=True)
    function_name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    parameters_json = Column('parameters', Text, nullable=True)
    return_type = Column(String(255), nullable=True)
    file_path = Column(String(1024), nullable=True)
    line_number = Column(Integer, nullable=True)
    complexity_score = Column(Integer, nullable=True)
    ai_analysis_json = Column('ai_analysis', Text, nullable=True)

    created_at = Column(DateTime, default=func.now())

    project = relationship("Project", back_populates="function_maps")

    @property
    def parameters(self) -> Dict[str, str]:
        return _load_json(self.parameters_json, {})

    @parameters.setter
    def parameters(self, value: Optional[Dict[str, str]]) -> None:
        self.parameters_json = _dump_json(value)

    @property
    def ai_analysis(self) -> Dict[str, Any]:
        return _load_json(self.ai_analysis_json, {})

    @ai_analysis.setter
    def ai_analysis(self, value: Optional[Dict[str, Any]]) -> None:
        self.ai_analysis_json = _dump_json(value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "function_name": self.function_name,
            "description": self.description,
            "parameters": self.parameters,
            "return_type": self.return_type,
            "file_path": self.file_path,
            "line_number": self.line_number,
            "complexity_score": self.complexity_score,
            "ai_analysis": self.ai_analysis,
            "created_at": self.created_at,
        }

    def __repr__(self):
        return f"<FunctionMap(id={self.id}, project_id={self.project_id}, function_name={self.function_name})>"


class PluginConfig(Base):
    """A generated, versioned browser plugin for a project."""
    __tablename__ = 'plugin_configs'

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey('projects.id', ondelete='CASCADE'), nullable=False, index=True)
    config_name = Column(String(255), nullable=False)
    plugin_code = Column(Text, nullable=False)
    version = Column(String(20), nullable=False, default='1.0.0')
    is_active = Column(Boolean, nullable=False, default=True)

    # Timestamps
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    project = relationship("Project", back_populates="plugin_configs")

    def __repr__(self):
        return f"<PluginConfig(id={self.id}, config_name={self.config_name}, version={self.version})>"
