"""
Service layer abstraction.

Each service encapsulates the logic for one collection and is handed
that collection when constructed, so API handlers never touch the
storage directly.
"""
