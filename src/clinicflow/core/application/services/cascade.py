from collections.abc import Callable, Sequence

import structlog

from clinicflow.core.domain.exceptions import PartialCascadeError, RemoteStoreError

logger = structlog.get_logger(__name__)


def run_steps(operation: str, steps: Sequence[tuple[str, Callable[[], object]]]) -> None:
    """
    Executa escritas remotas em sequência, sem rollback.

    Falha no primeiro passo propaga o RemoteStoreError original (nada foi
    escrito). Falha depois disso vira PartialCascadeError com os passos já
    concluídos.
    """
    done: list[str] = []
    for name, step in steps:
        try:
            step()
        except RemoteStoreError as exc:
            if not done:
                raise
            logger.error(
                "cascade.partial",
                operation=operation,
                completed_steps=done,
                failed_step=name,
                error=str(exc),
            )
            raise PartialCascadeError(operation, list(done), name) from exc
        done.append(name)
        logger.debug("cascade.step_ok", operation=operation, step=name)
