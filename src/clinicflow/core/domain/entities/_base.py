import re
from dataclasses import asdict, fields
from datetime import date, datetime, time
from decimal import Decimal
from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter

T = TypeVar("T")

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def to_wire(value: Any) -> Any:
    """Converte valores Python para o formato JSON aceito pelo backend."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, Decimal):
        return float(value)
    return value


def to_wire_row(data: dict[str, Any]) -> dict[str, Any]:
    """snake_case → camelCase + valores serializáveis."""
    return {to_camel(k): to_wire(v) for k, v in data.items()}


@lru_cache(maxsize=None)
def _adapter(cls: type) -> TypeAdapter:
    return TypeAdapter(cls)


class EntityMixin:
    @classmethod
    def from_dict(cls: type[T], data: dict[str, Any]) -> T:
        """
        Cria uma instância da entidade a partir de um dict (snake_case).
        """
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_row(cls: type[T], row: dict[str, Any]) -> T:
        """
        Cria a entidade a partir de uma linha remota (camelCase).
        Colunas desconhecidas e valores nulos são ignorados (vale o default);
        datas, decimais e literais são coeridos/validados pelo pydantic.
        """
        names = {f.name for f in fields(cls)}
        data = {to_snake(k): v for k, v in row.items()}
        return _adapter(cls).validate_python(
            {k: v for k, v in data.items() if k in names and v is not None}
        )

    def to_row(self) -> dict[str, Any]:
        return to_wire_row(self.to_dict())
