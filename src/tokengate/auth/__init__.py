"""Authentication primitives.

Learn: Two kinds of credentials:
1. Access token → signed JWT, stateless, short-lived, never revoked
2. Refresh token → opaque random string, stored in the ledger, revoked by deletion

The gate turns a bearer access token into an AuthContext for route handlers.
"""
