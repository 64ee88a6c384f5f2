from textwrap import dedent
import logging
from typing import Optional

import pydantic
from fastapi import FastAPI, Request
from fastapi.routing import APIRoute
from fastapi.middleware.cors import CORSMiddleware
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from database.mongo_adapter import MongoAdapter
from database.repository import ResourceRepository
from portfolio_api.adapters.mailer import BaseMailer, SmtpMailer
from portfolio_api.adapters.storage import BaseMediaStore, MediaStoreFactory
from portfolio_api.config.settings import Settings
from portfolio_api.errors import (
    handle_broad_exceptions,
    handle_pydantic_validation_errors,
)
from portfolio_api.routers.admin import router as admin_router
from portfolio_api.routers.contact import router as contact_router
from portfolio_api.routers.health import router as health_router
from portfolio_api.routers.resources import build_resource_router
from portfolio_api.routers.uploads import build_uploads_router
from portfolio_api.services.admin import AdminGate
from portfolio_api.services.resources import RESOURCE_KINDS, ResourceService

# Set up logging
logger = logging.getLogger(__name__)


async def log_requests(request: Request, call_next):
    logger.info("[REQUEST] %s %s", request.method, request.url.path)
    return await call_next(request)


def create_app(
    settings: Optional[Settings] = None,
    mongo_client: Optional[MongoClient] = None,
    media_store: Optional[BaseMediaStore] = None,
    mailer: Optional[BaseMailer] = None,
) -> FastAPI:
    """
    Create a FastAPI application.

    Collaborators are built from ``settings`` unless passed in, which is how
    tests swap in an in-process database, a temporary media store or a stub mailer.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="Portfolio API",
        summary="Portfolio content, image uploads and contact relay",
        version="v1",
        description=dedent(
            """\
        Content endpoints for achievements, projects and education entries.

        | Resource | Path |
        | --- | --- |
        | Achievements | `/achievements` |
        | Projects | `/projects` |
        | Education | `/education` |
        """
        ),
        docs_url="/docs",
        generate_unique_id_function=custom_generate_unique_id,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    mongo_adapter = MongoAdapter(settings.mongo_uri, db_name=settings.mongo_db_name, client=mongo_client)
    try:
        mongo_adapter.init_collections()
    except PyMongoError as e:
        # the server may come up later; requests report their own failures
        logger.error("Could not initialize MongoDB collections: %s", e)

    media_store = media_store or MediaStoreFactory.create(settings)

    app.state.settings = settings
    app.state.mongo_adapter = mongo_adapter
    app.state.media_store = media_store
    app.state.mailer = mailer or SmtpMailer.from_settings(settings)
    app.state.admin_gate = AdminGate(settings.admin_password)
    app.state.resource_services = {
        kind.name: ResourceService(
            kind,
            ResourceRepository(mongo_adapter, kind.collection),
            media_store,
            settings,
        )
        for kind in RESOURCE_KINDS
    }

    for kind in RESOURCE_KINDS:
        app.include_router(build_resource_router(kind), tags=[kind.name])
    app.include_router(admin_router, tags=["admin"])
    app.include_router(contact_router, tags=["contact"])
    app.include_router(build_uploads_router(settings.static_prefix), tags=["uploads"])
    app.include_router(health_router, tags=["health"])

    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.middleware("http")(log_requests)
    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    logging.basicConfig(level=settings.log_level)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
