from abc import ABC, abstractmethod
from datetime import datetime


class WatermarkStore(ABC):
    """
    Armazenamento durável local das marcas "lido até" por usuário.
    Chave: "<kind>_<userId>", valor: timestamp ISO-8601.
    """

    @staticmethod
    def key(kind: str, user_id: str) -> str:
        return f"{kind}_{user_id}"

    @abstractmethod
    def get(self, kind: str, user_id: str) -> datetime | None:
        ...

    @abstractmethod
    def set(self, kind: str, user_id: str, moment: datetime) -> None:
        ...
