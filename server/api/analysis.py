"""
FastAPI endpoints for project analysis.

This module provides the REST API endpoint that runs AI code analysis for a
project and records the outcome on the project's status.
"""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from agents.code_analysis import CodeAnalysisService, get_analysis_service
from database import get_db
from database import repository

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/api", tags=["analysis"])


# Request/Response Models
class AnalyzeProjectRequest(BaseModel):
    """Request model for analyzing a project."""
    model_config = ConfigDict(populate_by_name=True)

    project_id: Optional[int] = Field(None, alias="projectId", description="Project to analyze")
    analysis_type: Optional[str] = Field("full", alias="analysisType", description="Requested analysis depth")


class AnalyzeProjectResponse(BaseModel):
    """Response model for a completed analysis."""
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., description="Status message")
    function_count: int = Field(..., alias="functionCount", description="Number of functions stored")
    analysis_id: str = Field(..., alias="analysisId", description="Identifier of this analysis run")


# API Endpoints
@router.post("/analyze", response_model=AnalyzeProjectResponse)
def analyze_project(
    request: AnalyzeProjectRequest,
    db: Session = Depends(get_db),
    service: CodeAnalysisService = Depends(get_analysis_service)
):
    """
    Analyze a project's code with AI.

    Marks the project 'analyzing', runs the analysis, then marks it
    'completed' or 'failed'. A failed analysis answers 500 with the reason.

    Declared as a plain function: the page fetch and LLM call block, so
    FastAPI runs this handler in its threadpool instead of on the event loop.
    """
    if not request.project_id:
        raise HTTPException(status_code=400, detail="Project ID is required")

    try:
        project = repository.get_project(db, request.project_id)
        if not project:
            raise HTTPException(status_code=404, detail="Project not found")

        repository.update_project_status(db, project.id, "analyzing")

        result = service.analyze_project(db, project, request.analysis_type or "full")

        if result["success"]:
            repository.update_project_status(db, project.id, "completed")
            logger.info(f"Analysis completed for project {project.id}: {result['functionCount']} functions")

            return AnalyzeProjectResponse(
                message="Analysis completed successfully",
                function_count=result["functionCount"],
                analysis_id=result["analysisId"],
            )

        repository.update_project_status(db, project.id, "failed")
        logger.warning(f"Analysis failed for project {project.id}: {result['error']}")
        return JSONResponse(status_code=500, content={"error": result["error"]})

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Database error during analysis: {str(e)}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Analysis failed")
    except Exception as e:
        logger.error(f"Error during analysis: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Analysis failed")
