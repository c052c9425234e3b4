from dataclasses import dataclass

from clinicflow.core.application.cqrs import QueryDTO


@dataclass(frozen=True)
class GetVisibleDocumentsQuery(QueryDTO):
    user_id: str
