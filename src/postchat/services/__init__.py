"""
postchat.services

Service layer package.

Responsibilities:
- Hold use-case logic shared across transports (REST routers, Socket.IO handlers).
"""

# Package marker.
