"""Student performance dashboard.

The domain layer holds the roster and view-state models, services derive
the dashboard views, and the API exposes them over HTTP.
"""
