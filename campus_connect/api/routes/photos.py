from collections.abc import Iterator
from typing import Annotated, BinaryIO

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from campus_connect.api.routes.schemas import PhotoGalleryOut, PhotoOut
from campus_connect.api.routes.schemas.photos import PhotoMetadata
from campus_connect.auth.deps import CurrentPrincipal
from campus_connect.core.config import settings
from campus_connect.db import get_db
from campus_connect.models import Photo
from campus_connect.services import photos_service
from campus_connect.storage import StorageAdapter, get_storage

router = APIRouter(tags=["photos"])

DBSession = Annotated[Session, Depends(get_db)]
Storage = Annotated[StorageAdapter, Depends(get_storage)]

CHUNK_SIZE = 64 * 1024


def to_photo_out(photo: Photo) -> PhotoOut:
    return PhotoOut(
        id=photo.id,
        event_id=photo.event_id,
        user_id=photo.user_id,
        user_name=photo.user_name,
        file_name=photo.file_name,
        file_url=f"{settings.api_prefix}/photos/{photo.id}/file",
        caption=photo.caption,
        uploaded_at=photo.uploaded_at,
        metadata=PhotoMetadata(size=photo.size_bytes, mime_type=photo.mime_type),
    )


def _iter_file(stream: BinaryIO) -> Iterator[bytes]:
    with stream:
        while chunk := stream.read(CHUNK_SIZE):
            yield chunk


@router.get("/events/{event_id}/photos", response_model=PhotoGalleryOut)
def list_photos(event_id: str, db: DBSession):
    photos = [to_photo_out(p) for p in photos_service.list_photos(db, event_id)]
    return PhotoGalleryOut(event_id=event_id, photos=photos, total_count=len(photos))


@router.post("/events/{event_id}/photos", response_model=PhotoOut, status_code=201)
def upload_photo(
    event_id: str,
    principal: CurrentPrincipal,
    db: DBSession,
    storage: Storage,
    file: UploadFile = File(...),
    caption: str | None = Form(None),
):
    photo = photos_service.upload_photo(
        db,
        storage,
        principal,
        event_id,
        file.file,
        file.filename,
        file.content_type,
        caption=caption,
    )
    return to_photo_out(photo)


@router.get("/photos/{photo_id}/file")
def download_photo(photo_id: str, db: DBSession, storage: Storage):
    photo, stream = photos_service.open_photo(db, storage, photo_id)
    return StreamingResponse(
        _iter_file(stream),
        media_type=photo.mime_type,
        headers={"Content-Disposition": f'inline; filename="{photo.file_name}"'},
    )


@router.delete("/photos/{photo_id}", status_code=204)
def delete_photo(photo_id: str, principal: CurrentPrincipal, db: DBSession, storage: Storage):
    photos_service.delete_photo(db, storage, principal, photo_id)
    return Response(status_code=204)
