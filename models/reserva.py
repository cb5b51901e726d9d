"""
Modelo de Reserva
Retención a futuro de una parcela, independiente de una estadía en curso.
Sólo se usa para el control de disponibilidad: una reserva confirmada no ocupa
la parcela hasta que se convierte en Estadía.
"""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Column, Integer, String, ForeignKey, Date, DateTime, Text, Index
from sqlalchemy.orm import relationship

from database.conexion import Base


class EstadoReserva(str, Enum):
    """Estados de reserva"""
    PENDIENTE = "pendiente"
    CONFIRMADA = "confirmada"
    CANCELADA = "cancelada"


class Reserva(Base):
    __tablename__ = "reservas"
    __table_args__ = (
        Index('idx_reserva_parcela', 'parcela_id'),
        Index('idx_reserva_estado', 'estado'),
        Index('idx_reserva_fechas', 'fecha_inicio', 'fecha_fin'),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    parcela_id = Column(Integer, ForeignKey("parcelas.id"), nullable=False)

    # Fechas (ambas inclusivas)
    fecha_inicio = Column(Date, nullable=False)
    fecha_fin = Column(Date, nullable=False)

    # Responsable
    nombre_responsable = Column(String(120), nullable=False)
    celular = Column(String(30), nullable=True)
    observaciones = Column(Text, nullable=True)

    estado = Column(String(20), nullable=False, default=EstadoReserva.PENDIENTE.value)

    creado_en = Column(DateTime, default=datetime.utcnow)

    parcela = relationship("Parcela")

    def to_dict(self):
        return {
            "id": self.id,
            "parcela_id": self.parcela_id,
            "fecha_inicio": self.fecha_inicio.isoformat() if self.fecha_inicio else None,
            "fecha_fin": self.fecha_fin.isoformat() if self.fecha_fin else None,
            "nombre_responsable": self.nombre_responsable,
            "celular": self.celular,
            "estado": self.estado,
        }

    def __repr__(self):
        return f"<Reserva(id={self.id}, parcela_id={self.parcela_id}, estado='{self.estado}')>"
