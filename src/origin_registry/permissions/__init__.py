"""
origin_registry.permissions

Capability checks evaluated before an action is offered to the caller.

Responsibilities:
- Rule engine producing itemized permission results (`permissions.engine`).
- Feature/visibility filtering of navigation items (`permissions.capabilities`).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# These checks are advisory; the API re-checks access with `auth.policy`.
