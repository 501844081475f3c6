"""
origin_registry.services

Service-layer package.

Responsibilities:
- Own transaction boundaries and persistence decisions.
- Load the records that pure policy/permission functions decide on.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services raise `origin_registry.errors` exceptions; the API layer maps them to HTTP.
