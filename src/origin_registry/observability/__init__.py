"""
origin_registry.observability

Logging configuration and request context propagation.
"""

# Package marker.
