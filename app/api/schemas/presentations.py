from datetime import datetime
import uuid

from pydantic import BaseModel, ConfigDict, Field


class Presentation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID = Field(..., description="Presentation record id")
    file_path: str = Field(..., alias="filePath", description="Object path of the stored file in the blob store")
    file_name: str = Field(..., alias="fileName", description="Original file name as uploaded")
    created_at: datetime = Field(..., alias="createdAt", description="Record creation timestamp (UTC)")


class CreatePresentationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(..., alias="filePath", min_length=1, description="Object path returned by the blob store upload")
    file_name: str = Field(..., alias="fileName", min_length=1, description="Original file name shown in the viewer")
