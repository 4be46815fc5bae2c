"""
postchat.realtime

Socket.IO package.

Responsibilities:
- Build the AsyncServer and register chat/post/presence event handlers.
"""

# Package marker.
