import logging

from fastapi import HTTPException, Request, status

from app.api.schemas.auth import SessionPrincipal
from app.dependency_injection import get_container
from app.services.contracts import AuthServiceProtocol

logger = logging.getLogger(__name__)


async def get_optional_session(request: Request) -> SessionPrincipal | None:
    auth_service = get_container(request).resolve(AuthServiceProtocol)
    return await auth_service.session_from_headers(request.headers)


async def get_required_session(request: Request) -> SessionPrincipal:
    principal = await get_optional_session(request)
    if principal is None:
        logger.info("rejecting anonymous request")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="authentication required")
    return principal
