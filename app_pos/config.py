# ==============================================================================
# CONFIGURACIÓN
# ==============================================================================
# Todo se lee de variables de entorno con valores por defecto para desarrollo.
# create_app() acepta un dict que sobreescribe cualquier clave (tests).
#
# Comando: export APP_POS_SECRET_KEY="tu_clave_secreta_muy_larga_y_aleatoria"
# ==============================================================================

import os

from app_pos.services.sales_service import WALK_IN_CUSTOMER


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    # Clave de sesión; en producción DEBE venir del entorno
    SECRET_KEY = os.environ.get("APP_POS_SECRET_KEY", "app_pos_dev_secret_key_change_in_production")

    # Directorio donde viven los JSON de las colecciones
    DATA_DIR = os.environ.get("APP_POS_DATA_DIR", os.path.join(os.getcwd(), "data"))

    # Directorio de logs de rendimiento
    LOGS_DIR = os.environ.get("APP_POS_LOGS_DIR", os.path.join(os.getcwd(), "logs"))

    # True = se exige APP_POS_SECRET_KEY y cookies seguras
    PRODUCTION_MODE = _flag("APP_POS_PRODUCTION", "0")

    ENABLE_PROFILING = _flag("APP_POS_PROFILING", "1")

    WALK_IN_NAME = os.environ.get("APP_POS_WALK_IN_NAME", WALK_IN_CUSTOMER)

    CURRENCY = "JOD"

    # Servidor de desarrollo
    HOST = os.environ.get("FLASK_HOST", "0.0.0.0")
    PORT = int(os.environ.get("FLASK_PORT", 5000))
    DEBUG = _flag("FLASK_DEBUG", "0")

    # Cookies de sesión
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
