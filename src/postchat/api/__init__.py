"""
postchat.api

HTTP API package (FastAPI).

Responsibilities:
- App factory, dependencies, error mapping and routers.
"""

# Package marker.
