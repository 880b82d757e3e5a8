"""
Application package initializer.

The application is split by concern: ``core`` (configuration,
database, logging, errors), ``schemas`` (request and result models),
``services`` (store access and business rules) and ``api`` (versioned
HTTP routers).  The assembled FastAPI instance is exposed as ``app``.
"""

from .main import app  # noqa: F401
