"""
origin_registry.devices

Device group validation and device-creation commands.
"""

# Package marker.
