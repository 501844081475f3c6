"""
origin_registry.exchange

Exchange client package.

Responsibilities:
- Provide the client interface for calling the trading exchange API.
"""

# Package marker.
