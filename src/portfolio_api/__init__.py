"""
Portfolio API components.

Contains the FastAPI application, configuration, media and mail adapters,
and the content resource services behind the HTTP routes.
"""
