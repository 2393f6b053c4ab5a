"""
Pydantic models for structured LLM output in the code analysis agent.

The LLM is constrained to FunctionAnalysisOutput; each FunctionAnalysis becomes
one stored function map.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class FunctionAnalysis(BaseModel):
    """A single function, method or significant code block found in the source."""
    name: str = Field(..., description="The function or method name as written in the code.")
    description: str = Field(..., description="What the function does, in one or two sentences.")
    parameters: Dict[str, str] = Field(
        default_factory=dict,
        description="Mapping of parameter name to its type (use 'any' when the type is unknown)."
    )
    return_type: Optional[str] = Field(None, description="The return type, if applicable.")
    file_path: Optional[str] = Field(None, description="The file the function lives in, if determinable.")
    line_number: Optional[int] = Field(None, description="Approximate line number of the definition.")
    complexity_score: int = Field(
        ...,
        ge=1,
        le=10,
        description="Complexity from 1 (trivial) to 10 (most complex)."
    )
    insights: List[str] = Field(default_factory=list, description="Key observations about the function.")
    suggestions: List[str] = Field(default_factory=list, description="Concrete suggestions for improvement.")


class FunctionAnalysisOutput(BaseModel):
    """
    Structured output for the code analysis LLM call.

    Every function the model identifies in the submitted source.
    """
    functions: List[FunctionAnalysis] = Field(
        default_factory=list,
        description="All functions, methods and significant code blocks found in the code."
    )
