"""
Log operativo del motor de ocupación
Una línea por operación: AREA | Usuario | Accion | Detalle | clave=valor ...
"""
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from config import LOG_BACKUP_COUNT, LOG_FILE, LOG_LEVEL, LOG_MAX_BYTES

_LOGGER_NAME = "camping_ocupacion"


def _crear_handler() -> logging.Handler:
    try:
        return RotatingFileHandler(
            Path(LOG_FILE), maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
        )
    except OSError:
        # Sin permisos sobre el archivo: a stderr
        return logging.StreamHandler()


def _configurar_logger() -> logging.Logger:
    logger = logging.getLogger(_LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    logger.propagate = False

    handler = _crear_handler()
    handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"))
    logger.addHandler(handler)
    return logger


_logger = _configurar_logger()


def formatear_evento(area: str, usuario: str, accion: str, detalle: str = "", **contexto) -> str:
    """Arma la línea de log; el contexto se agrega como pares clave=valor en el orden recibido"""
    partes = [area.upper(), f"Usuario: {usuario}", f"Accion: {accion}"]
    if detalle:
        partes.append(f"Detalle: {detalle}")
    if contexto:
        partes.append(" ".join(f"{clave}={valor}" for clave, valor in contexto.items()))
    return " | ".join(partes)


def log_event(
    area: str,
    usuario: str,
    accion: str,
    detalle: str = "",
    level: int = logging.INFO,
    **contexto
) -> None:
    _logger.log(level, formatear_evento(area, usuario, accion, detalle, **contexto))
