"""
AI Learning Service Agent Systems

This package contains the AI agents used by the service:
- code_analysis: Extracts function metadata from project source with an LLM
"""
