"""
Archivo de inicialización del paquete models.
Expone todas las clases de los diferentes archivos para que
SQLAlchemy (Base.metadata) las detecte al importar 'models'.
"""

# 1. Estadías, acampantes y auditoría (desde estadia.py)
from .estadia import (
    Estadia,
    Acampante,
    EstadiaEvento,
    EstadoEstadia,
    TipoEventoEstadia,
    CAMPOS_RECURSOS
)

# 2. Parcelas (desde parcela.py)
from .parcela import Parcela, EstadoParcela

# 3. Reservas a futuro (desde reserva.py)
from .reserva import Reserva, EstadoReserva

__all__ = [
    "Estadia", "Acampante", "EstadiaEvento", "EstadoEstadia", "TipoEventoEstadia", "CAMPOS_RECURSOS",
    "Parcela", "EstadoParcela",
    "Reserva", "EstadoReserva"
]
