"""
Pydantic schema definitions for API payloads.

Schemas are separated from the persisted documents so the API
representation (for example ``SafeUser``) can differ from what is
stored.
"""
