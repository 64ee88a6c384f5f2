"""
Service layer for the Portfolio API.

Contains the content resource services and the admin password gate.
"""
