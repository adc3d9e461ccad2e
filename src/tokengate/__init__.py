"""tokengate — authentication and session-lifecycle service.

Password login, short-lived signed access tokens, and rotating opaque
refresh tokens stored server-side so they can be revoked.
"""

__version__ = "0.1.0"
