"""
Endpoints de ocupación de parcelas
Adaptador HTTP delgado sobre los servicios de disponibilidad, fusión, asignación y egreso
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import conexion
from schemas.parcelas import (
    AsignacionRequest, CheckoutRequest, DisponibilidadResponse, FusionInfo, FusionRequest,
    ResultadoAsignacion, ResultadoCheckout, ResultadoFusion
)
from services import AvailabilityService, PlotAssignmentService, StayCheckoutService, StayMergeService
from utils.errores import ConflictError, NotFoundError, OccupancyError, StoreFailure, ValidationError


router = APIRouter(tags=["Parcelas"])

STATUS_POR_CODIGO = {
    NotFoundError.codigo: status.HTTP_404_NOT_FOUND,
    ValidationError.codigo: status.HTTP_400_BAD_REQUEST,
    ConflictError.codigo: status.HTTP_409_CONFLICT,
    StoreFailure.codigo: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _http_error(codigo: Optional[str], mensaje: Optional[str]) -> HTTPException:
    return HTTPException(
        status_code=STATUS_POR_CODIGO.get(codigo, status.HTTP_400_BAD_REQUEST),
        detail=mensaje or "Operación no realizada"
    )


@router.get("/parcelas/{parcela_id}/disponibilidad", response_model=DisponibilidadResponse)
def consultar_disponibilidad(
    parcela_id: int,
    fecha_inicio: date = Query(..., description="Primer día del rango (inclusive)"),
    fecha_fin: date = Query(..., description="Último día del rango (inclusive)"),
    db: Session = Depends(conexion.get_db)
):
    """
    Consulta si la parcela está libre en el rango, o qué reserva/estadía la bloquea
    """
    try:
        return AvailabilityService.verificar_disponibilidad(db, parcela_id, fecha_inicio, fecha_fin)
    except OccupancyError as e:
        raise _http_error(e.codigo, e.mensaje)


@router.get("/parcelas/{parcela_id}/fusion-info", response_model=Optional[FusionInfo])
def obtener_info_fusion(parcela_id: int, db: Session = Depends(conexion.get_db)):
    """
    Datos de la estadía que ocupa la parcela, para confirmar una fusión. null si está libre.
    """
    try:
        return AvailabilityService.obtener_info_fusion(db, parcela_id)
    except OccupancyError as e:
        raise _http_error(e.codigo, e.mensaje)


@router.post("/estadias/{estadia_id}/asignar-parcelas", response_model=ResultadoAsignacion)
def asignar_parcelas(estadia_id: str, data: AsignacionRequest, db: Session = Depends(conexion.get_db)):
    resultado = PlotAssignmentService.asignar_parcelas(
        db,
        estadia_id,
        data.parcela_ids,
        fusion_info=data.fusion_info,
        cant_parcelas=data.cant_parcelas,
        usuario=data.usuario
    )
    if not resultado.exitoso:
        raise _http_error(resultado.codigo_error, resultado.error)
    return resultado


@router.post("/estadias/{estadia_id}/fusionar", response_model=ResultadoFusion)
def fusionar_estadias(estadia_id: str, data: FusionRequest, db: Session = Depends(conexion.get_db)):
    resultado = StayMergeService.fusionar_estadias(
        db, estadia_id, data.estadia_destino_id, sin_parcela=data.sin_parcela, usuario=data.usuario
    )
    if not resultado.exitoso:
        raise _http_error(resultado.codigo_error, resultado.error)
    return resultado


@router.post("/estadias/{estadia_id}/finalizar", response_model=ResultadoCheckout)
def finalizar_estadia(estadia_id: str, data: CheckoutRequest, db: Session = Depends(conexion.get_db)):
    resultado = StayCheckoutService.finalizar_estadia(
        db, estadia_id, usuario=data.usuario, fecha_egreso_real=data.fecha_egreso_real
    )
    if not resultado.exitoso:
        raise _http_error(resultado.codigo_error, resultado.error)
    return resultado
