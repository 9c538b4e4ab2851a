"""
Application package initializer.

The API is split into ``core`` (configuration, logging, storage,
errors, notifications), ``schemas``, ``services`` and versioned
routers under ``api``.
"""

from .main import app  # noqa: F401
