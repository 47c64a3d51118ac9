from pydantic import BaseModel, ConfigDict, Field


class PresignedUploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: str
    url: str
    content_type: str = Field(alias="contentType")
