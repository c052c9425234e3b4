from pathlib import Path

from decouple import config

# -------------------------------
# Diretórios base
# -------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent

# -------------------------------
# Logging
# -------------------------------
LOG_LEVEL = config('LOG_LEVEL', default='INFO')
JSON_LOGS = config('JSON_LOGS', default=False, cast=bool)

# -------------------------------
# Backend hospedado (dados + identidade)
# -------------------------------
CLINICFLOW_STORE_URL   = config('CLINICFLOW_STORE_URL', default='http://localhost:54321')
CLINICFLOW_ANON_KEY    = config('CLINICFLOW_ANON_KEY', default='')
CLINICFLOW_SERVICE_KEY = config('CLINICFLOW_SERVICE_KEY', default='')
CLINICFLOW_TIMEOUT     = config('CLINICFLOW_TIMEOUT', default=5.0, cast=float)
CLINICFLOW_RETRIES     = config('CLINICFLOW_RETRIES', default=3, cast=int)

# -------------------------------
# Cache agregado
# -------------------------------
CLINICFLOW_REFRESH_WORKERS = config('CLINICFLOW_REFRESH_WORKERS', default=8, cast=int)
CLINICFLOW_SYSTEM_NAME     = config('CLINICFLOW_SYSTEM_NAME', default='ClinicFlow')

# Vazio desativa a promoção automática no login (use `manage.py seed_admin`)
CLINICFLOW_BOOTSTRAP_ADMIN_EMAIL = config('CLINICFLOW_BOOTSTRAP_ADMIN_EMAIL', default='')

# -------------------------------
# Redis (marcas de leitura das notificações)
# -------------------------------
REDIS_HOST     = config('REDIS_HOST', default='localhost')
REDIS_PORT     = config('REDIS_PORT', default=6379, cast=int)
REDIS_DB       = config('REDIS_DB', default=0, cast=int)
REDIS_PASSWORD = config('REDIS_PASSWORD', default=None)

# -------------------------------
# Django (apenas o framework de comandos de gerenciamento)
# -------------------------------
SECRET_KEY     = config('SECRET_KEY', default='clinicflow-cli-only')
DEBUG          = config('DEBUG', default=False, cast=bool)
INSTALLED_APPS = [
    'clinicflow.adapters.cli.apps.ClinicFlowCliConfig',
]
# Sem ORM: os dados vivem no backend hospedado
DATABASES      = {}
USE_TZ         = True
TIME_ZONE      = config('TIME_ZONE', default='America/Sao_Paulo')
# structlog_config.configure_logging já configurou o logging raiz
LOGGING_CONFIG = None
