"""
Document schemas for the portfolio collections.

Each schema describes one MongoDB collection. They coerce incoming values
and drop unknown keys; nothing is required, so an empty form still persists.
"""

from typing import Dict, Any, Optional, Type

from pydantic import BaseModel, ConfigDict, Field


class ContentDocumentSchema(BaseModel):
    """Fields shared by every content resource"""
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    title: Optional[str] = Field(None, description="Display title")
    description: Optional[str] = Field(None, description="Free-form description")
    image: Optional[str] = Field(None, description="Stored filename or absolute URL")


class AchievementSchema(ContentDocumentSchema):
    """Schema for achievement documents"""


class ProjectSchema(ContentDocumentSchema):
    """Schema for project documents"""
    link: Optional[str] = Field(None, description="External project link")


class EducationSchema(ContentDocumentSchema):
    """Schema for education documents"""
    institution: Optional[str] = Field(None, description="School or institution name")
    duration: Optional[str] = Field(None, description="Human readable period, e.g. 2019 - 2023")


# Schema mapping for easy access
DOCUMENT_SCHEMAS: Dict[str, Type[ContentDocumentSchema]] = {
    'achievements': AchievementSchema,
    'projects': ProjectSchema,
    'educations': EducationSchema,
}


def coerce_document(collection: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Coerce fields against the collection schema, keeping only the keys that were given."""
    schema = DOCUMENT_SCHEMAS.get(collection)
    if schema is None:
        raise ValueError(f"Unknown collection: {collection}")
    return schema.model_validate(fields).model_dump(exclude_unset=True)
