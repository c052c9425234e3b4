from pydantic import BaseModel, Field


class RoomDTO(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
