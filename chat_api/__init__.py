"""
Top‑level package for the Chat API.

Makes ``chat_api`` importable so modules within ``app`` can be used
with fully qualified names like ``chat_api.app.main``.  All
functionality lives in submodules under ``app``.
"""

__all__ = []
