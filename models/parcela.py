"""
Modelo de Parcela
Sitio físico del predio (parcela de camping, cama, habitación)
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Column, Integer, String, ForeignKey, DateTime, Text, Index, CheckConstraint
)
from sqlalchemy.orm import relationship

from database.conexion import Base


class EstadoParcela(str, Enum):
    """Estados de una parcela"""
    LIBRE = "libre"
    OCUPADA = "ocupada"
    MANTENIMIENTO = "mantenimiento"


class Parcela(Base):
    """
    Parcela física.
    - estadia_id es la estadía que la ocupa; no nulo si y sólo si estado == ocupada
    - version: control de concurrencia optimista
    """
    __tablename__ = "parcelas"
    __table_args__ = (
        CheckConstraint(
            "(estado = 'ocupada' AND estadia_id IS NOT NULL) OR "
            "(estado <> 'ocupada' AND estadia_id IS NULL)",
            name="ck_parcela_ocupada_con_estadia",
        ),
        Index('idx_parcela_estado', 'estado'),
        Index('idx_parcela_estadia', 'estadia_id'),
    )

    id = Column(Integer, primary_key=True, index=True)
    nombre_parcela = Column(String(50), nullable=False, unique=True, index=True)  # Ej: "A1", "CAMA-1"
    estado = Column(String(20), nullable=False, default=EstadoParcela.LIBRE.value)
    estadia_id = Column(String(36), ForeignKey("estadias.id"), nullable=True)
    observaciones = Column(Text, nullable=True)

    # Auditoría
    creado_en = Column(DateTime, default=datetime.utcnow)
    actualizado_en = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    actualizado_por = Column(String(50), nullable=True)

    version = Column(Integer, nullable=False, default=1)

    # Relaciones
    estadia = relationship("Estadia", foreign_keys=[estadia_id], back_populates="parcelas")

    __mapper_args__ = {"version_id_col": version}

    @property
    def esta_ocupada(self) -> bool:
        return self.estado == EstadoParcela.OCUPADA.value

    def ocupar(self, estadia_id: str, usuario: str = None):
        self.estado = EstadoParcela.OCUPADA.value
        self.estadia_id = estadia_id
        self.actualizado_por = usuario

    def liberar(self, usuario: str = None):
        self.estado = EstadoParcela.LIBRE.value
        self.estadia_id = None
        self.actualizado_por = usuario

    def __repr__(self):
        return f"<Parcela(id={self.id}, nombre='{self.nombre_parcela}', estado='{self.estado}')>"
