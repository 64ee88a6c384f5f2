"""
Configuration management for the Portfolio API.

Contains the Pydantic settings object assembled once at startup and passed
into every component.
"""
