"""
Dependency wiring for the FastAPI app.

Collaborators are built once in ``create_app`` and kept on ``app.state``;
these accessors hand them to the routes.
"""

from fastapi import Request

from portfolio_api.adapters.mailer import BaseMailer
from portfolio_api.adapters.storage import BaseMediaStore
from portfolio_api.config.settings import Settings
from portfolio_api.services.admin import AdminGate
from portfolio_api.services.resources import ResourceService


def get_settings_from_app(request: Request) -> Settings:
    return request.app.state.settings


def get_media_store(request: Request) -> BaseMediaStore:
    return request.app.state.media_store


def get_mailer(request: Request) -> BaseMailer:
    return request.app.state.mailer


def get_admin_gate(request: Request) -> AdminGate:
    return request.app.state.admin_gate


def get_resource_service(request: Request, kind_name: str) -> ResourceService:
    return request.app.state.resource_services[kind_name]


def request_origin(request: Request) -> str:
    """Scheme and host the request was addressed to, e.g. http://localhost:5000"""
    return str(request.base_url).rstrip("/")
