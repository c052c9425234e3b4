from dataclasses import dataclass

from clinicflow.core.application.cqrs import CommandDTO
from clinicflow.core.application.dtos.document_dto import DocumentDTO


@dataclass(frozen=True)
class CreateDocumentCommand(CommandDTO):
    payload: DocumentDTO

@dataclass(frozen=True)
class DeleteDocumentCommand(CommandDTO):
    id: str
