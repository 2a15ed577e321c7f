from __future__ import annotations

import logging
from pathlib import PurePosixPath
import time
from typing import Any
import uuid

from app.api.schemas.presentations import Presentation
from app.services.contracts import BlobStoreProtocol, DatabaseServiceProtocol

logger = logging.getLogger(__name__)

_PRESENTATION_COLUMNS = "id, file_path, file_name, created_at"


def _presentation_from_row(row: Any) -> Presentation:
    return Presentation(
        id=row["id"],
        file_path=row["file_path"],
        file_name=row["file_name"],
        created_at=row["created_at"],
    )


def build_object_path(file_name: str) -> str:
    """Object key for a new upload: ``<epoch-millis>-<base file name>``."""

    base_name = PurePosixPath(file_name.replace("\\", "/")).name or "presentation"
    return f"{int(time.time() * 1000)}-{base_name}"


class PresentationService:
    """Slide-deck metadata in Postgres plus the uploaded files in the blob store."""

    def __init__(self, database: DatabaseServiceProtocol, storage: BlobStoreProtocol) -> None:
        self._database = database
        self._storage = storage

    async def create_presentation(self, *, file_path: str, file_name: str) -> Presentation:
        row = await self._database.fetchrow(
            f"""
            INSERT INTO powerpoints (file_path, file_name)
            VALUES ($1, $2)
            RETURNING {_PRESENTATION_COLUMNS}
            """,
            file_path,
            file_name,
        )
        if row is None:
            raise RuntimeError("presentation insert returned no row")
        presentation = _presentation_from_row(row)
        logger.info("created presentation", extra={"presentation_id": str(presentation.id)})
        return presentation

    async def get_presentation(self, presentation_id: str) -> Presentation | None:
        row = await self._database.fetchrow(
            f"SELECT {_PRESENTATION_COLUMNS} FROM powerpoints WHERE id = $1::uuid LIMIT 1",
            str(uuid.UUID(str(presentation_id))),
        )
        if row is None:
            logger.debug("presentation lookup returned no rows", extra={"presentation_id": str(presentation_id)})
            return None
        return _presentation_from_row(row)

    async def upload_presentation(self, *, file_name: str, content: bytes, content_type: str | None = None) -> Presentation:
        object_path = build_object_path(file_name)
        stored_path = await self._storage.upload(object_path, content, content_type)
        return await self.create_presentation(file_path=stored_path, file_name=file_name)

    async def download_presentation(self, presentation_id: str) -> tuple[Presentation, bytes] | None:
        presentation = await self.get_presentation(presentation_id)
        if presentation is None:
            return None
        content = await self._storage.download(presentation.file_path)
        return presentation, content
