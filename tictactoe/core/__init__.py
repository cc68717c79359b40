"""Core gameplay primitives (board rules and the push event catalog).

Kept free of FastAPI concerns so it can be reused by the service layer, the
API routes and tests.
"""
