"""
Content resource service.

Shared logic behind the achievements, projects and education endpoints:
choosing the image reference on write, rendering it on read, and turning
repository outcomes into results or ResourceServiceError.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type

from database.repository import RepositoryResult, ResourceRepository
from portfolio_api.adapters.storage import BaseMediaStore, is_absolute_url
from portfolio_api.config.settings import Settings
from portfolio_api.schemas import (
    AchievementResponse,
    EducationResponse,
    ProjectResponse,
    ResourceResponse,
)

logger = logging.getLogger(__name__)


class ResourceServiceError(Exception):
    """A write (or a surfaced read) could not be completed"""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


@dataclass(frozen=True)
class ResourceKind:
    """Describes one content collection and how it is exposed over HTTP"""
    name: str
    collection: str
    path: str
    fields: Tuple[str, ...]
    response_model: Type[ResourceResponse]
    create_defaults: Dict[str, Any] = field(default_factory=dict)


ACHIEVEMENTS = ResourceKind(
    name="achievements",
    collection="achievements",
    path="/achievements",
    fields=("title", "description"),
    response_model=AchievementResponse,
)

PROJECTS = ResourceKind(
    name="projects",
    collection="projects",
    path="/projects",
    fields=("title", "description", "link"),
    response_model=ProjectResponse,
    create_defaults={"link": ""},
)

EDUCATION = ResourceKind(
    name="education",
    collection="educations",
    path="/education",
    fields=("institution", "title", "duration", "description"),
    response_model=EducationResponse,
)

RESOURCE_KINDS = (ACHIEVEMENTS, PROJECTS, EDUCATION)


@dataclass
class MediaUpload:
    """An uploaded file as received from the request"""
    data: bytes
    filename: Optional[str]
    content_type: Optional[str] = None


class ResourceService:
    """Create, list, update and delete one kind of content resource"""

    def __init__(
        self,
        kind: ResourceKind,
        repository: ResourceRepository,
        media_store: BaseMediaStore,
        settings: Settings,
    ):
        self.kind = kind
        self.repository = repository
        self.media_store = media_store
        self.list_errors_as_empty = settings.list_errors_as_empty
        self.cleanup_orphaned_media = settings.cleanup_orphaned_media
        self.public_base_url = settings.public_base_url

    # ---------------------------------------------------------------- rendering

    def render(self, document: Dict[str, Any], origin: str) -> Dict[str, Any]:
        """Response view of a stored document; the stored image is not modified."""
        rendered = dict(document)
        rendered["_id"] = str(document.get("_id"))
        rendered["image"] = self.media_store.render(document.get("image"), self.public_base_url or origin)
        return rendered

    # ------------------------------------------------------------------- images

    def select_image(self, upload: Optional[MediaUpload], image_url: Optional[str]) -> Optional[str]:
        """
        Pick the image reference for a write.

        An uploaded file always wins, then a non-empty imageUrl. None means
        the request carries no image.
        """
        if upload is not None and upload.filename:
            try:
                return self.media_store.store(upload.data, upload.filename, upload.content_type)
            except Exception as e:
                logger.error("Error storing upload for %s: %s", self.kind.name, e)
                raise ResourceServiceError("Failed to store image", e) from e
        if image_url:
            return image_url
        return None

    def _discard_media(self, reference: Optional[str]) -> None:
        if not reference or is_absolute_url(reference):
            return
        try:
            self.media_store.delete(reference)
        except Exception as e:
            logger.warning("Could not remove stored media %s: %s", reference, e)

    # --------------------------------------------------------------- operations

    def list(self, origin: str) -> List[Dict[str, Any]]:
        result = self.repository.list()
        if not result.ok:
            if self.list_errors_as_empty:
                logger.error("Listing %s failed, answering with an empty list: %s", self.kind.name, result.error)
                return []
            raise ResourceServiceError("Failed to load", result.error)
        return [self.render(document, origin) for document in result.value]

    def create(
        self,
        fields: Dict[str, Any],
        origin: str,
        upload: Optional[MediaUpload] = None,
        image_url: Optional[str] = None,
    ) -> Dict[str, Any]:
        try:
            image = self.select_image(upload, image_url)
        except ResourceServiceError as e:
            raise ResourceServiceError("Failed to save", e.cause) from e

        document = {**self.kind.create_defaults, **self._known_fields(fields)}
        document["image"] = image or ""

        result = self.repository.create(document)
        if not result.ok:
            self._abandon_upload(upload, image)
            raise ResourceServiceError("Failed to save", result.error)
        return self.render(result.value, origin)

    def update(
        self,
        doc_id: str,
        fields: Dict[str, Any],
        origin: str,
        upload: Optional[MediaUpload] = None,
        image_url: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """Partial update: only submitted fields change. None when the id is unknown."""
        changes = self._known_fields(fields)
        try:
            image = self.select_image(upload, image_url)
        except ResourceServiceError as e:
            raise ResourceServiceError("Failed to update", e.cause) from e

        previous_image = None
        if image is not None:
            changes["image"] = image
            previous_image = self._current_image(doc_id)

        result = self.repository.update_by_id(doc_id, changes)
        if not result.ok:
            self._abandon_upload(upload, image)
            raise ResourceServiceError("Failed to update", result.error)
        if result.value is None:
            self._abandon_upload(upload, image)
            return None

        if self.cleanup_orphaned_media and previous_image and previous_image != image:
            self._discard_media(previous_image)
        return self.render(result.value, origin)

    def delete(self, doc_id: str) -> None:
        """Deleting an unknown id is not an error."""
        result = self.repository.delete_by_id(doc_id)
        if not result.ok:
            raise ResourceServiceError("Failed to delete", result.error)
        if result.value is not None and self.cleanup_orphaned_media:
            self._discard_media(result.value.get("image"))

    # ------------------------------------------------------------------ helpers

    def _known_fields(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return {key: value for key, value in fields.items() if key in self.kind.fields and value is not None}

    def _current_image(self, doc_id: str) -> Optional[str]:
        if not self.cleanup_orphaned_media:
            return None
        result: RepositoryResult = self.repository.get_by_id(doc_id)
        if not result.ok or result.value is None:
            return None
        return result.value.get("image")

    def _abandon_upload(self, upload: Optional[MediaUpload], image: Optional[str]) -> None:
        """Remove a file stored for a write that did not persist."""
        if upload is not None and image and self.cleanup_orphaned_media:
            self._discard_media(image)
