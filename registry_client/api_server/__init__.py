"""
API server package — HTTP/REST interface.

Exposes the session's profile, owned assets and recent activity, the
ownership-guarded asset views, and the write actions. Delegates to the
reconciliation layer for data.
"""
