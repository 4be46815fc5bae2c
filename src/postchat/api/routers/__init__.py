"""
postchat.api.routers

HTTP routers package.

Responsibilities:
- Group `/api/auth`, `/api/posts` and health routers.
"""

# Package marker.
