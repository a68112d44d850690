"""
FastAPI routers for all API endpoints.

Routers are the boundary that acts on service outcomes: they revalidate
cached views and issue redirects. Services never do.
"""
