from pydantic import BaseModel, ConfigDict, Field


class AuthUrlResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    auth_url: str = Field(alias="authUrl", description="Google consent URL")


class GoogleStatusResponse(BaseModel):
    connected: bool = Field(description="Whether Google Tasks tokens are stored")
