from dataclasses import dataclass
from typing import List, Optional

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Path,
    Request,
    UploadFile,
    status
)
from fastapi.responses import JSONResponse

from portfolio_api.dependencies import get_resource_service, request_origin
from portfolio_api.schemas import DeleteResourceResponse, ErrorResponse
from portfolio_api.services.resources import (
    MediaUpload,
    ResourceKind,
    ResourceServiceError,
)


RESOURCE_FORM_FIELDS = ("title", "description", "link", "institution", "duration")


@dataclass
class ResourceForm:
    """Multipart form or JSON body shared by the create and update endpoints of every resource kind."""
    fields: dict
    image_url: Optional[str]
    upload: Optional[MediaUpload]


async def resource_form(
    request: Request,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    link: Optional[str] = Form(None, description="Projects only"),
    institution: Optional[str] = Form(None, description="Education only"),
    duration: Optional[str] = Form(None, description="Education only"),
    imageUrl: Optional[str] = Form(None, description="Used when no file is uploaded"),
    image: Optional[UploadFile] = File(None, description="Image file; takes precedence over imageUrl"),
) -> ResourceForm:
    if request.headers.get("content-type", "").startswith("application/json"):
        return await json_resource_form(request)

    upload = None
    if image is not None and image.filename:
        upload = MediaUpload(data=await image.read(), filename=image.filename, content_type=image.content_type)
    fields = {
        "title": title,
        "description": description,
        "link": link,
        "institution": institution,
        "duration": duration,
    }
    return ResourceForm(fields=fields, image_url=imageUrl, upload=upload)


async def json_resource_form(request: Request) -> ResourceForm:
    """Same fields as the multipart form, read from a JSON object; files cannot be sent this way."""
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON body")
    if not isinstance(body, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="JSON body must be an object")

    fields = {name: body.get(name) for name in RESOURCE_FORM_FIELDS}
    image_url = body.get("imageUrl")
    if not isinstance(image_url, str):
        image_url = None
    return ResourceForm(fields=fields, image_url=image_url, upload=None)


def error_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": message},
    )


def build_resource_router(kind: ResourceKind) -> APIRouter:
    """Create the list/create/update/delete routes for one resource kind."""
    router = APIRouter()
    model = kind.response_model
    failure = {500: {"model": ErrorResponse}}

    @router.get(kind.path, response_model=List[model], name=f"list_{kind.name}")
    def list_resources(request: Request):
        """
        List all resources, newest first.

        Stored filenames are returned as absolute URLs under the static uploads path.
        """
        service = get_resource_service(request, kind.name)
        try:
            return service.list(request_origin(request))
        except ResourceServiceError as e:
            return error_response(e.message)

    @router.post(kind.path, response_model=model, responses=failure, name=f"create_{kind.name}")
    def create_resource(request: Request, form: ResourceForm = Depends(resource_form)):
        """
        Create a resource.

        An uploaded `image` file wins over `imageUrl`; with neither the image is empty.
        """
        service = get_resource_service(request, kind.name)
        try:
            return service.create(
                form.fields,
                request_origin(request),
                upload=form.upload,
                image_url=form.image_url,
            )
        except ResourceServiceError as e:
            return error_response(e.message)

    @router.put(f"{kind.path}/{{resource_id}}", response_model=Optional[model], responses=failure, name=f"update_{kind.name}")
    def update_resource(
        request: Request,
        resource_id: str = Path(..., description="Document id"),
        form: ResourceForm = Depends(resource_form),
    ):
        """
        Update the submitted fields of a resource.

        Fields that are not submitted keep their stored value. Returns null when the id is unknown.
        """
        service = get_resource_service(request, kind.name)
        try:
            return service.update(
                resource_id,
                form.fields,
                request_origin(request),
                upload=form.upload,
                image_url=form.image_url,
            )
        except ResourceServiceError as e:
            return error_response(e.message)

    @router.delete(f"{kind.path}/{{resource_id}}", response_model=DeleteResourceResponse, responses=failure, name=f"delete_{kind.name}")
    def delete_resource(request: Request, resource_id: str = Path(..., description="Document id")):
        """Delete a resource. Unknown ids report success as well."""
        service = get_resource_service(request, kind.name)
        try:
            service.delete(resource_id)
        except ResourceServiceError as e:
            return error_response(e.message)
        return DeleteResourceResponse(success=True)

    return router
