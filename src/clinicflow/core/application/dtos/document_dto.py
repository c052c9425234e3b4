from pydantic import BaseModel, Field


class DocumentDTO(BaseModel):
    title: str = Field(min_length=1)
    link_url: str = Field(min_length=1)
    target_user_id: str | None = None   # None ⇒ visível a todos os profissionais
