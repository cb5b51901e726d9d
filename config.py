"""
Configuración del sistema de ocupación de parcelas
Se lee del entorno (y de un .env local si existe)
"""
import os

from dotenv import load_dotenv

load_dotenv()


def _build_database_url() -> str:
    """Arma la URL de conexión: DATABASE_URL explícita, Postgres por DB_*, o SQLite local"""
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    if os.getenv("DB_HOST"):
        # URL de conexión clásica (síncrona), usa psycopg2 por defecto
        return (
            f"postgresql://{os.getenv('DB_USER')}:{os.getenv('DB_PASSWORD')}"
            f"@{os.getenv('DB_HOST')}:{os.getenv('DB_PORT', '5432')}/{os.getenv('DB_NAME')}"
        )
    return "sqlite:///./camping.db"


# Database
DATABASE_URL = _build_database_url()
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# Logging
LOG_FILE = os.getenv("CAMPING_LOG_FILE", "camping_logs.txt")
LOG_LEVEL = os.getenv("CAMPING_LOG_LEVEL", "INFO").upper()
LOG_MAX_BYTES = int(os.getenv("CAMPING_LOG_MAX_BYTES", "1000000"))
LOG_BACKUP_COUNT = int(os.getenv("CAMPING_LOG_BACKUP_COUNT", "3"))

# Zona horaria del predio
CAMPING_TIMEZONE = os.getenv("CAMPING_TIMEZONE", "America/Argentina/Buenos_Aires")

# CORS
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if origin.strip()
]
