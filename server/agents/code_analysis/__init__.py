"""
Code Analysis Agent Package

Fetches a project's source code and uses a structured-output LLM call to
describe every function it contains.
"""

from .content_fetcher import ContentFetcher, ContentFetchError, extract_inline_scripts
from .models import FunctionAnalysis, FunctionAnalysisOutput
from .service import AnalysisError, CodeAnalysisService, get_analysis_service

__all__ = [
    "ContentFetcher",
    "ContentFetchError",
    "extract_inline_scripts",
    "FunctionAnalysis",
    "FunctionAnalysisOutput",
    "AnalysisError",
    "CodeAnalysisService",
    "get_analysis_service",
]
