"""
Adapter layer for the Portfolio API.

Contains abstraction adapters for media storage (local/S3) and outgoing mail
(SMTP).
"""
