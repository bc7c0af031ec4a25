from __future__ import annotations

from datetime import datetime

from campus_connect.api.routes.schemas.base import SchemaBase


class PhotoMetadata(SchemaBase):
    size: int
    mime_type: str


class PhotoOut(SchemaBase):
    id: str
    event_id: str
    user_id: str
    user_name: str
    file_name: str
    file_url: str
    caption: str
    uploaded_at: datetime
    metadata: PhotoMetadata


class PhotoGalleryOut(SchemaBase):
    event_id: str
    photos: list[PhotoOut]
    total_count: int
