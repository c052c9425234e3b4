import structlog
from django.apps import AppConfig

logger = structlog.get_logger(__name__)


class ClinicFlowCliConfig(AppConfig):
    """App Django sem models: só expõe os comandos de `manage.py`."""
    name = "clinicflow.adapters.cli"
    label = "clinicflow_cli"
    verbose_name = "ClinicFlow CLI"

    def ready(self):
        logger.debug("cli.app_ready")
