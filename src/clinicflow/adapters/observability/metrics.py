from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

registry = CollectorRegistry()

CACHE_REFRESH_COUNT = Counter(
    "clinicflow_cache_refresh_total",
    "Recargas completas do cache agregado",
    ["outcome"],          # complete | partial
    registry=registry,
)

CACHE_FETCH_FAILURES = Counter(
    "clinicflow_cache_fetch_failures_total",
    "Leituras de coleção que falharam (valor anterior mantido)",
    ["collection"],
    registry=registry,
)

CACHE_REFRESH_DURATION = Histogram(
    "clinicflow_cache_refresh_duration_seconds",
    "Duracao de load_all()",
    registry=registry,
)

COMMAND_DURATION = Histogram(
    "clinicflow_command_duration_seconds",
    "Duracao de comandos (pre-checagem + escrita)",
    ["command"],
    registry=registry,
)

COMMAND_FAILURES = Counter(
    "clinicflow_command_failures_total",
    "Comandos que terminaram em erro",
    ["command", "kind"],  # validation | remote | cascade | identity
    registry=registry,
)

IDENTITY_LATENCY = Histogram(
    "clinicflow_identity_request_seconds",
    "Latencia do provedor de identidade",
    ["operation"],
    registry=registry,
)
IDENTITY_SUCCESS = Counter(
    "clinicflow_identity_success_total",
    "Chamadas bem-sucedidas ao provedor de identidade",
    ["operation"],
    registry=registry,
)
IDENTITY_FAILURE = Counter(
    "clinicflow_identity_failure_total",
    "Chamadas com falha ao provedor de identidade",
    ["operation"],
    registry=registry,
)


def render_metrics() -> tuple[bytes, str]:
    """Retorna (payload, content-type) no formato de exposição do Prometheus."""
    return generate_latest(registry), CONTENT_TYPE_LATEST
