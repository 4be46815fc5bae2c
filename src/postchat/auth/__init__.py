"""
postchat.auth

Authentication package.

Responsibilities:
- JWT issuing and validation.
- Password hashing.
- FastAPI auth dependency (bearer token -> Principal).
"""

# Package marker.
