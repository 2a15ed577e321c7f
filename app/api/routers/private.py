from fastapi import APIRouter, Depends

from app.api.dependencies.auth import get_required_session
from app.api.schemas.auth import PrivateDataResponse, SessionPrincipal

router = APIRouter(tags=["auth"])


@router.get("/private", response_model=PrivateDataResponse)
async def private_data(principal: SessionPrincipal = Depends(get_required_session)) -> PrivateDataResponse:
    return PrivateDataResponse(message="This is private", user=principal)
