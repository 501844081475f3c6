"""
origin_registry.api

API package for the registry service.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring, error handlers and request/response models.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer stays thin: request parsing + auth + delegation to services.
