"""
Schemas module - entities, operation inputs and API responses.

Usage:
    from collabhub.schemas.schemas import Project, CreateProjectInput
"""
