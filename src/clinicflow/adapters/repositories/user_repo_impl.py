from clinicflow.adapters.repositories.collection_repo_impl import RemoteCollectionRepoImpl
from clinicflow.core.domain.entities.user_entity import UserEntity
from clinicflow.core.domain.repositories.entity_repositories import UserRepository


class UserRepoImpl(RemoteCollectionRepoImpl[UserEntity], UserRepository):
    collection = "users"
    entity_cls = UserEntity

    def find_by_email(self, email: str) -> UserEntity | None:
        rows = self.client.select_eq(self.collection, "email", email)
        if len(rows) != 1:
            # nenhum ou ambíguo ⇒ sem perfil
            return None
        return UserEntity.from_row(rows[0])
