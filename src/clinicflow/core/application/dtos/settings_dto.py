from pydantic import BaseModel, Field


class SystemSettingsDTO(BaseModel):
    system_name: str = Field(min_length=1)
    logo_url: str | None = None
