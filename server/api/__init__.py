"""
REST API routers for the AI Learning Service.
"""
