"""
Access policy layer.

``context`` holds the caller identity attached to a session, ``policies`` the
named per-table row policies, ``enforcement`` the session hooks that apply them,
and ``migration`` the native PostgreSQL rendering of the same policies.
"""
