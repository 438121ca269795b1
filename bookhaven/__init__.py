"""
BookHaven API Package

Headless REST backend for the BookHaven reading community.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy engine/session construction and the declarative base
- exceptions.py: Application error taxonomy mapped to HTTP status codes
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic (identity, catalog mirror, lists, ratings,
  recommendations, external catalog client, caching, rate limiting)
"""

__version__ = "1.0.0"
