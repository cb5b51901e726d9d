"""
Modelos de Estadía
Incluye: Estadia (grupo + responsable), Acampante (persona del grupo),
EstadiaEvento (auditoría inmutable de fusiones, asignaciones y egresos)
"""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Column, Integer, String, ForeignKey, DateTime, Boolean, Numeric, Text, Index, JSON
)
from sqlalchemy.orm import relationship

from database.conexion import Base


# ========================================================================
# ENUMS
# ========================================================================

class EstadoEstadia(str, Enum):
    """Ciclo de vida de una estadía; cancelada y finalizada son terminales"""
    ACTIVA = "activa"
    CANCELADA = "cancelada"
    FINALIZADA = "finalizada"


class TipoEventoEstadia(str, Enum):
    """Tipos de eventos para auditoría"""
    FUSION = "FUSION"
    ASIGNACION_PARCELAS = "ASIGNACION_PARCELAS"
    CHECKOUT = "CHECKOUT"
    LIBERACION_PARCELA = "LIBERACION_PARCELA"


# Campos de recursos que se suman en una fusión completa
CAMPOS_RECURSOS = (
    "cant_personas_total",
    "cant_parcelas_total",
    "cant_sillas_total",
    "cant_mesas_total",
)


def _nuevo_id() -> str:
    return str(uuid.uuid4())


# ----------- ESTADIA -----------
class Estadia(Base):
    __tablename__ = "estadias"
    __table_args__ = (
        Index('idx_estadia_estado', 'estado_estadia'),
        Index('idx_estadia_parcela_asignada', 'parcela_asignada'),
        Index('idx_estadia_parcela_id', 'parcela_id'),
        Index('idx_estadia_fechas', 'fecha_ingreso', 'fecha_egreso_programada'),
    )

    id = Column(String(36), primary_key=True, default=_nuevo_id)
    celular_responsable = Column(String(30), nullable=False)

    # Fechas
    fecha_ingreso = Column(DateTime, nullable=True)
    fecha_egreso_programada = Column(DateTime, nullable=False)
    fecha_egreso_real = Column(DateTime, nullable=True)  # Se completa en el checkout

    # Recursos
    cant_personas_total = Column(Integer, default=0)
    cant_parcelas_total = Column(Integer, default=0)
    cant_sillas_total = Column(Integer, default=0)
    cant_mesas_total = Column(Integer, default=0)
    tipo_vehiculo = Column(String(30), nullable=True)
    cant_vehiculos_total = Column(Integer, default=0)
    acumulado_noches_persona = Column(Integer, default=0)

    # Financiero
    costo_total_calculado = Column(Numeric(12, 2), default=0)
    descuento_arbitrario = Column(Numeric(12, 2), default=0)
    monto_final_a_pagar = Column(Numeric(12, 2), default=0)
    saldo_pendiente = Column(Numeric(12, 2), default=0)

    # Estado
    estado_estadia = Column(String(20), nullable=False, default=EstadoEstadia.ACTIVA.value)
    ingreso_confirmado = Column(Boolean, nullable=False, default=False)  # False = pre-registro sin arribo

    # Parcela: por id (nuevo) y por nombre (histórico, clave de join heredada)
    parcela_id = Column(Integer, nullable=True)
    parcela_asignada = Column(String(50), nullable=True)  # Ej: "A1", "CAMA-1"

    observaciones = Column(Text, nullable=True)

    # Auditoría
    creado_en = Column(DateTime, default=datetime.utcnow)
    actualizado_en = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    actualizado_por = Column(String(50), nullable=True)

    version = Column(Integer, nullable=False, default=1)

    # Relaciones
    acampantes = relationship("Acampante", back_populates="estadia", order_by="Acampante.creado_en")
    parcelas = relationship("Parcela", foreign_keys="Parcela.estadia_id", back_populates="estadia")
    eventos = relationship("EstadiaEvento", back_populates="estadia", order_by="EstadiaEvento.id")

    __mapper_args__ = {"version_id_col": version}

    def is_active(self) -> bool:
        return self.estado_estadia == EstadoEstadia.ACTIVA.value

    def recursos(self) -> dict:
        """Totales de recursos; los valores ausentes cuentan como cero"""
        return {campo: getattr(self, campo) or 0 for campo in CAMPOS_RECURSOS}

    def agregar_evento(self, tipo, usuario, descripcion=None, payload=None):
        """Helper para crear evento de auditoría"""
        return EstadiaEvento(
            estadia_id=self.id,
            tipo_evento=tipo.value if isinstance(tipo, TipoEventoEstadia) else tipo,
            usuario=usuario,
            descripcion=descripcion,
            payload=payload
        )

    def to_dict(self):
        return {
            "id": self.id,
            "celular_responsable": self.celular_responsable,
            "fecha_ingreso": self.fecha_ingreso.isoformat() if self.fecha_ingreso else None,
            "fecha_egreso_programada": (
                self.fecha_egreso_programada.isoformat() if self.fecha_egreso_programada else None
            ),
            "estado_estadia": self.estado_estadia,
            "ingreso_confirmado": self.ingreso_confirmado,
            "parcela_id": self.parcela_id,
            "parcela_asignada": self.parcela_asignada,
            **self.recursos(),
        }

    def __repr__(self):
        return f"<Estadia(id={self.id}, responsable='{self.celular_responsable}', estado='{self.estado_estadia}')>"


# ----------- ACAMPANTE -----------
class Acampante(Base):
    """
    Persona perteneciente a una estadía.
    El celular funciona como identificador natural.
    """
    __tablename__ = "acampantes"
    __table_args__ = (
        Index('idx_acampante_estadia', 'estadia_id'),
        Index('idx_acampante_celular', 'celular'),
    )

    id = Column(String(36), primary_key=True, default=_nuevo_id)
    estadia_id = Column(String(36), ForeignKey("estadias.id"), nullable=False)

    celular = Column(String(30), nullable=False)
    nombre_completo = Column(String(120), nullable=False)
    dni_pasaporte = Column(String(40), nullable=True)
    edad = Column(Integer, nullable=True)

    # Datos médicos / riesgo
    es_persona_riesgo = Column(Boolean, default=False)
    obra_social = Column(String(80), nullable=True)
    enfermedades = Column(Text, nullable=True)
    alergias = Column(Text, nullable=True)
    medicacion = Column(Text, nullable=True)
    grupo_sanguineo = Column(String(5), nullable=True)
    contacto_emergencia = Column(String(120), nullable=True)

    # Responsable de pago del grupo
    es_responsable_pago = Column(Boolean, nullable=False, default=False)
    celular_responsable = Column(String(30), nullable=True)

    creado_en = Column(DateTime, default=datetime.utcnow)

    estadia = relationship("Estadia", back_populates="acampantes")

    def __repr__(self):
        return f"<Acampante(id={self.id}, nombre='{self.nombre_completo}', estadia_id={self.estadia_id})>"


# ----------- EVENTOS -----------
class EstadiaEvento(Base):
    """
    Auditoría inmutable de las operaciones sobre una estadía.
    Se escribe en la misma transacción que la operación que describe.
    """
    __tablename__ = "estadia_eventos"
    __table_args__ = (
        Index('idx_estadia_evento_estadia', 'estadia_id'),
        Index('idx_estadia_evento_tipo', 'tipo_evento'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    estadia_id = Column(String(36), ForeignKey("estadias.id"), nullable=False)
    tipo_evento = Column(String(30), nullable=False)
    usuario = Column(String(50), nullable=False)
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False)
    payload = Column(JSON, nullable=True)
    descripcion = Column(Text, nullable=True)

    estadia = relationship("Estadia", back_populates="eventos")
