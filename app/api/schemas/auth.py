from pydantic import BaseModel, Field


class SessionPrincipal(BaseModel):
    user_id: str = Field(..., description="Canonical user id as string")
    email: str = Field(..., description="User email associated with the session")
    display_name: str = Field(..., description="User-facing display name")


class PrivateDataResponse(BaseModel):
    message: str
    user: SessionPrincipal
