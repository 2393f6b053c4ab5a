"""
Code analysis agent for the AI Learning Service.

Fetches a project's source, asks the LLM for structured function metadata and
stores one function map per discovered function. Failures never escape
``analyze_project``; they come back as ``{"success": False, "error": ...}`` so
the caller can mark the project failed.
"""

import logging
import time
from typing import Any, Dict, Optional

from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import Runnable
from sqlalchemy.orm import Session

from config import Settings, create_llm_instance, get_settings
from database import Project
from database import repository
from .content_fetcher import ContentFetcher, ContentFetchError
from .models import FunctionAnalysisOutput
from .prompts import CODE_ANALYSIS_HUMAN_PROMPT, CODE_ANALYSIS_SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class AnalysisError(Exception):
    """Raised when the LLM analysis of a project's code fails."""
    pass


class CodeAnalysisService:
    """
    Runs AI analysis for projects.

    The structured LLM is created on first use so the service can be built
    without an OpenAI key (and so tests can inject a fake runnable).
    """

    def __init__(
        self,
        structured_llm: Optional[Runnable] = None,
        content_fetcher: Optional[ContentFetcher] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self._structured_llm = structured_llm
        self.content_fetcher = content_fetcher or ContentFetcher(timeout=self.settings.content_fetch_timeout)
        self.prompt = ChatPromptTemplate.from_messages([
            ("system", CODE_ANALYSIS_SYSTEM_PROMPT),
            ("human", CODE_ANALYSIS_HUMAN_PROMPT),
        ])

    @property
    def structured_llm(self) -> Runnable:
        if self._structured_llm is None:
            llm = create_llm_instance()
            self._structured_llm = llm.with_structured_output(
                FunctionAnalysisOutput, method="function_calling"
            )
            logger.info("Code analysis LLM initialized")
        return self._structured_llm

    def analyze_code(self, code: str, project_type: str, analysis_type: str = "full") -> FunctionAnalysisOutput:
        """
        Ask the LLM to describe the functions in ``code``.

        Args:
            code: Source text; truncated to ``analysis_max_code_chars``
            project_type: 'website' or 'codebase'
            analysis_type: Requested analysis depth, passed through to the prompt

        Returns:
            Parsed FunctionAnalysisOutput

        Raises:
            AnalysisError: If the LLM call fails or returns nothing usable
        """
        limit = self.settings.analysis_max_code_chars
        if len(code) > limit:
            logger.info(f"Truncating source from {len(code)} to {limit} characters")
            code = code[:limit]

        chain = self.prompt | self.structured_llm
        try:
            result = chain.invoke({
                "project_type": project_type,
                "analysis_type": analysis_type,
                "code": code,
            })
        except Exception as e:
            logger.error(f"AI analysis error: {e}", exc_info=True)
            raise AnalysisError("Failed to analyze code with AI") from e

        if result is None:
            raise AnalysisError("AI analysis returned no result")
        if isinstance(result, dict):
            result = FunctionAnalysisOutput.model_validate(result)
        return result

    def analyze_project(self, db: Session, project: Project, analysis_type: str = "full") -> Dict[str, Any]:
        """
        Analyze a project and store the functions found.

        Args:
            db: Database session used to store function maps
            project: Project to analyze
            analysis_type: Requested analysis depth

        Returns:
            ``{"success": True, "functionCount": n, "analysisId": id}`` or
            ``{"success": False, "error": message}``
        """
        logger.info(f"Starting {analysis_type} analysis for project {project.id} ({project.project_type})")

        try:
            code_content = self.content_fetcher.fetch_project_content(
                project.project_type, project.url, project.name
            )

            if not code_content.strip():
                logger.warning(f"No code content found for project {project.id}")
                return {
                    "success": False,
                    "error": "No code content found to analyze",
                }

            analysis = self.analyze_code(code_content, project.project_type, analysis_type)

            function_count = 0
            for function in analysis.functions:
                repository.create_function_map(
                    db,
                    project_id=project.id,
                    function_name=function.name,
                    description=function.description,
                    parameters=function.parameters,
                    return_type=function.return_type,
                    file_path=function.file_path,
                    line_number=function.line_number,
                    complexity_score=function.complexity_score,
                    ai_analysis={
                        "insights": function.insights,
                        "suggestions": function.suggestions,
                    },
                    commit=False,
                )
                function_count += 1

            # One transaction per analysis; a failed insert leaves no partial rows.
            db.commit()

            analysis_id = f"analysis_{project.id}_{int(time.time() * 1000)}"
            logger.info(f"✓ Analysis {analysis_id} stored {function_count} functions")

            return {
                "success": True,
                "functionCount": function_count,
                "analysisId": analysis_id,
            }

        except (ContentFetchError, AnalysisError) as e:
            logger.error(f"Analysis failed for project {project.id}: {e}")
            return {"success": False, "error": str(e)}
        except Exception as e:
            logger.error(f"Analysis service error for project {project.id}: {e}", exc_info=True)
            db.rollback()
            return {"success": False, "error": str(e) or "Unknown analysis error"}


# Global analysis service instance
_analysis_service: Optional[CodeAnalysisService] = None


def get_analysis_service() -> CodeAnalysisService:
    """Get or create the global code analysis service."""
    global _analysis_service
    if _analysis_service is None:
        _analysis_service = CodeAnalysisService()
    return _analysis_service
