"""
Document persistence for portfolio content.

Contains the MongoDB adapter, per-collection document schemas and the
resource repository used by the API services.
"""
