from typing import Optional, List, Dict, Any
from datetime import datetime
from pydantic import BaseModel, Field, model_validator


# ========================================================================
# FUSIÓN
# ========================================================================

class FusionInfo(BaseModel):
    """Datos que el flujo de asignación recibe cuando la parcela elegida ya está ocupada"""
    debe_fusionar: bool = False
    estadia_destino_id: Optional[str] = None
    celular_responsable: Optional[str] = None
    responsable_nombre: Optional[str] = None
    parcela_ocupada_id: Optional[int] = None

    @model_validator(mode="after")
    def validar_destino(self):
        if self.debe_fusionar and not self.estadia_destino_id:
            raise ValueError("estadia_destino_id es obligatorio cuando debe_fusionar es true")
        return self


class FusionRequest(BaseModel):
    estadia_destino_id: str = Field(..., min_length=1)
    sin_parcela: bool = Field(False, description="La persona entrante no trae carpa: sólo se mueve el acampante")
    usuario: str = Field("sistema", min_length=1, max_length=50)


class ResultadoFusion(BaseModel):
    exitoso: bool
    error: Optional[str] = None
    codigo_error: Optional[str] = None
    estadia_origen_id: Optional[str] = None
    estadia_destino_id: Optional[str] = None
    acampantes_reubicados: int = 0
    recursos_sumados: bool = False
    recursos_destino: Optional[Dict[str, int]] = None


# ========================================================================
# ASIGNACIÓN
# ========================================================================

class AsignacionRequest(BaseModel):
    parcela_ids: List[int] = Field(default_factory=list)
    fusion_info: Optional[FusionInfo] = None
    cant_parcelas: Optional[int] = Field(None, ge=0, description="Parcelas que trae el grupo entrante")
    usuario: str = Field("sistema", min_length=1, max_length=50)


class ResultadoAsignacion(BaseModel):
    exitoso: bool
    error: Optional[str] = None
    codigo_error: Optional[str] = None
    fusionada: bool = False
    estadia_id: Optional[str] = None  # Estadía que quedó con las parcelas
    parcelas_asignadas: List[int] = Field(default_factory=list)


# ========================================================================
# DISPONIBILIDAD
# ========================================================================

class DisponibilidadResponse(BaseModel):
    disponible: bool
    motivo: Optional[str] = None  # "reservada" | "ocupada"
    conflicto: Optional[Dict[str, Any]] = None


# ========================================================================
# CHECKOUT
# ========================================================================

class CheckoutRequest(BaseModel):
    usuario: str = Field("sistema", min_length=1, max_length=50)
    fecha_egreso_real: Optional[datetime] = None


class ParcelaLiberada(BaseModel):
    parcela_id: int
    nombre_parcela: str
    estado: str
    estadia_id: Optional[str] = None


class ResultadoCheckout(BaseModel):
    exitoso: bool
    error: Optional[str] = None
    codigo_error: Optional[str] = None
    estadia_id: Optional[str] = None
    fecha_egreso_real: Optional[datetime] = None
    parcelas: List[ParcelaLiberada] = Field(default_factory=list)
