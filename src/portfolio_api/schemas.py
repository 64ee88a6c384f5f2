####################################
# --- Request/response schemas --- #
####################################

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ResourceResponse(BaseModel):
    """Fields every content resource is returned with."""
    id: str = Field(alias="_id", description="Document id")
    title: Optional[str] = None
    description: Optional[str] = None
    image: str = Field(
        "",
        description="Absolute image URL (uploads are resolved against the serving origin).",
        json_schema_extra={"example": "http://localhost:5000/uploads/1718000000000-3f2a9c1b7d4e.png"},
    )
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)


class AchievementResponse(ResourceResponse):
    """Response model for achievements."""


class ProjectResponse(ResourceResponse):
    """Response model for projects."""
    link: Optional[str] = None

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "_id": "665f1c2e8b3e4a0012345678",
                "title": "Demo",
                "description": "A demo project",
                "image": "http://localhost:5000/uploads/1718000000000-3f2a9c1b7d4e.png",
                "link": "https://github.com/example/demo",
                "createdAt": "2024-06-10T08:00:00",
                "updatedAt": "2024-06-10T08:00:00",
            }
        },
    )


class EducationResponse(ResourceResponse):
    """Response model for education entries."""
    institution: Optional[str] = None
    duration: Optional[str] = None


class DeleteResourceResponse(BaseModel):
    """Response model for `DELETE /<resource>/:id`."""
    success: bool = True


class ErrorResponse(BaseModel):
    """Body of a failed write."""
    error: str


class AdminVerifyRequest(BaseModel):
    """Request model for `POST /admin/verify`."""
    password: Any = None


class AdminVerifyResponse(BaseModel):
    """Response model for `POST /admin/verify`."""
    success: bool
    error: Optional[str] = None


class ContactRequest(BaseModel):
    """Request model for `POST /send`."""
    name: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Ada",
                "email": "ada@example.com",
                "subject": "Hello",
                "message": "Loved your portfolio!",
            }
        }
    )


class ContactResponse(BaseModel):
    """Response model for `POST /send`."""
    success: bool
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    components: Dict[str, str]
