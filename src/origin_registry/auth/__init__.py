"""
origin_registry.auth

Authentication/authorization package.

Responsibilities:
- JWT helpers, password hashing and validation.
- FastAPI auth dependencies (Principal + role checks).
- Pure access-control decision tables (`auth.policy`).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Policy functions take already-loaded values and never touch the database.
