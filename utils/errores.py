"""
Errores del motor de ocupación
Cada error lleva un código estable y un mensaje apto para mostrar al usuario;
los detalles internos del store quedan encadenados (__cause__), nunca en el mensaje.
"""


class OccupancyError(Exception):
    """Base de errores del motor de ocupación"""
    codigo = "error"

    def __init__(self, mensaje: str):
        self.mensaje = mensaje
        super().__init__(mensaje)


class NotFoundError(OccupancyError):
    """Estadía, parcela o reserva inexistente"""
    codigo = "not_found"


class ValidationError(OccupancyError):
    """Datos de entrada inválidos o invariante violado"""
    codigo = "validation_error"


class ConflictError(OccupancyError):
    """Modificación concurrente o parcela tomada por otra estadía"""
    codigo = "conflict"


class StoreFailure(OccupancyError):
    """Falla del store (conexión, constraint); nunca se reintenta"""
    codigo = "store_failure"
