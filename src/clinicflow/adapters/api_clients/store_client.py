from __future__ import annotations

from typing import Any

import requests

from clinicflow.adapters.api_clients.base_api_client import BaseAPIClient
from clinicflow.core.domain.exceptions import RemoteStoreError, UniqueViolationError

UNIQUE_VIOLATION_CODE = "23505"


class RemoteStoreClient(BaseAPIClient):
    """
    Cliente REST para as tabelas do backend hospedado (`/rest/v1/<tabela>`).

    Filtros no formato `coluna=eq.valor`; linhas trafegam em camelCase.
    Toda falha vira RemoteStoreError (UniqueViolationError para 409/23505).
    """

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        timeout: float = 5.0,
        retries: int = 3,
    ) -> None:
        super().__init__(
            base_url=base_url.rstrip("/") + "/rest/v1",
            default_headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            retries=retries,
        )
        self.api_key = api_key

    def set_access_token(self, token: str | None) -> None:
        """Usa o token do usuário logado (RLS) ou volta para a chave anônima."""
        self.session.headers["Authorization"] = f"Bearer {token or self.api_key}"
        self.log.debug("Token de acesso atualizado", authenticated=bool(token))

    # ------------------------------------------------------------------ leitura
    def select_all(self, table: str) -> list[dict[str, Any]]:
        return self._call("select", table, "GET", params={"select": "*"}) or []

    def select_eq(self, table: str, column: str, value: Any) -> list[dict[str, Any]]:
        params = {"select": "*", column: f"eq.{value}"}
        return self._call("select", table, "GET", params=params) or []

    # ------------------------------------------------------------------ escrita
    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        rows = self._call(
            "insert", table, "POST", json=row, headers={"Prefer": "return=representation"}
        )
        return rows[0] if rows else row

    def upsert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        rows = self._call(
            "upsert",
            table,
            "POST",
            json=row,
            headers={"Prefer": "resolution=merge-duplicates,return=representation"},
        )
        return rows[0] if rows else row

    def update_by_id(self, table: str, entity_id: str, changes: dict[str, Any]) -> None:
        self.update_where(table, {"id": entity_id}, changes)

    def update_where(self, table: str, filters: dict[str, Any], changes: dict[str, Any]) -> None:
        params = {col: f"eq.{val}" for col, val in filters.items()}
        self._call("update", table, "PATCH", params=params, json=changes)

    def delete_by_id(self, table: str, entity_id: str) -> None:
        self.delete_where(table, "id", entity_id)

    def delete_where(self, table: str, column: str, value: Any) -> None:
        self._call("delete", table, "DELETE", params={column: f"eq.{value}"})

    # ------------------------------------------------------------------ utils
    def _call(self, operation: str, table: str, method: str, **kwargs: Any) -> Any:
        try:
            resp = self._request(method, table, **kwargs)
        except requests.RequestException as exc:
            raise RemoteStoreError(
                f"{operation} em {table} falhou: {exc}",
                collection=table,
                operation=operation,
            ) from exc

        if resp.status_code >= 400:
            raise self._to_error(resp, operation, table)
        if not resp.content:
            return None
        return resp.json()

    def _to_error(self, resp: requests.Response, operation: str, table: str) -> RemoteStoreError:
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        code = body.get("code")
        message = body.get("message") or resp.text or resp.reason
        cls = (
            UniqueViolationError
            if resp.status_code == 409 or code == UNIQUE_VIOLATION_CODE
            else RemoteStoreError
        )
        self.log.error(
            "Erro do backend",
            operation=operation,
            table=table,
            status_code=resp.status_code,
            code=code,
            message=message,
        )
        return cls(
            f"{operation} em {table}: {message}",
            collection=table,
            operation=operation,
            status_code=resp.status_code,
            code=code,
        )
