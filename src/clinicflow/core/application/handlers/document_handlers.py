from clinicflow.core.application.queries.document_queries import GetVisibleDocumentsQuery
from clinicflow.core.application.services.state_cache import AggregateStateCache
from clinicflow.core.domain.entities.document_entity import DocumentEntity


class GetVisibleDocumentsHandler:
    """Documentos privados do usuário primeiro, depois os gerais; por título."""

    def __init__(self, cache: AggregateStateCache):
        self.cache = cache

    def handle(self, query: GetVisibleDocumentsQuery) -> list[DocumentEntity]:
        snap = self.cache.snapshot
        user = snap.find("users", query.user_id)
        docs = snap.documents if user.is_admin else [d for d in snap.documents if d.is_visible_to(user.id)]
        return sorted(docs, key=lambda d: (not d.is_private, d.title.lower()))
