"""
Application package for the library API.

The package is split by layer: ``core`` (settings, logging, database,
errors, validation), ``stores`` (one per table), ``services`` (rules
spanning several stores), ``schemas`` (request/response models) and
``api`` (FastAPI routers and handlers).
"""

from .main import app, create_app  # noqa: F401
