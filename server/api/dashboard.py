"""
FastAPI endpoints for dashboard aggregates.

Summary statistics and the recent activity feed, both derived from stored rows.
"""

import logging
from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from config import get_settings
from database import get_db
from database import repository

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/stats")
async def get_stats(db: Session = Depends(get_db)):
    """
    Get dashboard statistics.

    Returns total projects, completed analyses, analyzed functions and
    active plugins.
    """
    try:
        return repository.get_project_stats(db)

    except SQLAlchemyError as e:
        logger.error(f"Error fetching stats: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch statistics")


@router.get("/activity")
async def get_activity(limit: int = 10, db: Session = Depends(get_db)):
    """Get the most recent project and plugin events."""
    if limit < 1:
        raise HTTPException(status_code=400, detail="limit must be positive")

    try:
        activities = repository.get_recent_activity(
            db,
            limit=limit,
            window_days=get_settings().activity_window_days,
        )
        return {"activities": activities}

    except SQLAlchemyError as e:
        logger.error(f"Error fetching activity: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch activity")
