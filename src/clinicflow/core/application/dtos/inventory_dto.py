from pydantic import BaseModel, Field


class InventoryItemDTO(BaseModel):
    name: str = Field(min_length=1)
    total_quantity: int = Field(ge=0)
