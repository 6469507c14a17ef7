"""
Top-level package for the Library Management API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``library_api.app.main:app``.
"""

__all__ = []
