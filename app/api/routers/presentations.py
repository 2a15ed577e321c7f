import logging
import mimetypes
from pathlib import PurePosixPath
import uuid
from urllib.parse import quote

from fastapi import APIRouter, File, HTTPException, Request, Response, UploadFile, status

from app.api.schemas.presentations import CreatePresentationRequest, Presentation
from app.dependency_injection import get_container
from app.services.contracts import PresentationServiceProtocol
from app.services.storage_client import StorageError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/presentations", tags=["presentations"])

ALLOWED_EXTENSIONS = frozenset({".ppt", ".pptx", ".odp", ".key", ".pdf"})


def _content_disposition(file_name: str) -> str:
    return f"inline; filename*=UTF-8''{quote(file_name)}"


@router.post(
    "",
    response_model=Presentation,
    status_code=status.HTTP_201_CREATED,
    summary="Create a presentation record for an already stored file",
)
async def create_presentation(payload: CreatePresentationRequest, request: Request) -> Presentation:
    service = get_container(request).resolve(PresentationServiceProtocol)
    return await service.create_presentation(file_path=payload.file_path, file_name=payload.file_name)


@router.post(
    "/upload",
    response_model=Presentation,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a slide deck and create its record",
    description="Stores the file in object storage under `<epoch-millis>-<file name>` and records its path.",
)
async def upload_presentation(request: Request, file: UploadFile = File(...)) -> Presentation:
    file_name = file.filename or ""
    if PurePosixPath(file_name).suffix.lower() not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"unsupported file type; expected one of {', '.join(sorted(ALLOWED_EXTENSIONS))}",
        )
    content = await file.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="uploaded file is empty")

    service = get_container(request).resolve(PresentationServiceProtocol)
    try:
        return await service.upload_presentation(file_name=file_name, content=content, content_type=file.content_type)
    except StorageError as exc:
        logger.warning("presentation upload failed", extra={"file_name": file_name, "status_code": exc.status_code})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Upload to storage failed") from exc


@router.get("/{presentation_id}", response_model=Presentation)
async def get_presentation(presentation_id: uuid.UUID, request: Request) -> Presentation:
    service = get_container(request).resolve(PresentationServiceProtocol)
    presentation = await service.get_presentation(str(presentation_id))
    if presentation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Presentation not found")
    return presentation


@router.get("/{presentation_id}/file", response_class=Response)
async def download_presentation(presentation_id: uuid.UUID, request: Request) -> Response:
    service = get_container(request).resolve(PresentationServiceProtocol)
    try:
        result = await service.download_presentation(str(presentation_id))
    except StorageError as exc:
        logger.warning(
            "presentation download failed",
            extra={"presentation_id": str(presentation_id), "status_code": exc.status_code},
        )
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Download from storage failed") from exc

    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Presentation not found")

    presentation, content = result
    media_type = mimetypes.guess_type(presentation.file_name)[0] or "application/octet-stream"
    return Response(
        content=content,
        media_type=media_type,
        headers={"content-disposition": _content_disposition(presentation.file_name)},
    )
