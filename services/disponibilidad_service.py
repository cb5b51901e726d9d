"""
Service de disponibilidad de parcelas
Camino de sólo lectura usado antes de asignar: decide si un rango de fechas choca
con una reserva o con una estadía en curso, y si hace falta ofrecer una fusión.
"""

import logging
from datetime import date
from typing import Optional, Union

from sqlalchemy.orm import Session

from database.store import StoreGateway
from schemas.parcelas import DisponibilidadResponse, FusionInfo
from utils.errores import NotFoundError, StoreFailure, ValidationError
from utils.fechas import hay_solapamiento, validar_rango
from utils.logging_utils import log_event

MOTIVO_RESERVADA = "reservada"
MOTIVO_OCUPADA = "ocupada"


class AvailabilityService:
    """Servicio para consultar disponibilidad de una parcela en un rango de fechas"""

    @staticmethod
    def verificar_disponibilidad(
        db: Session,
        parcela_id: int,
        fecha_inicio: Union[date, str],
        fecha_fin: Union[date, str],
        usuario: str = "sistema"
    ) -> DisponibilidadResponse:
        """
        Verifica si la parcela está libre en [fecha_inicio, fecha_fin] (ambos inclusive).

        1. Reservas no canceladas de la parcela que se solapen con el rango -> "reservada"
        2. Estadías activas con ingreso confirmado en la parcela que se solapen -> "ocupada"

        Raises:
            ValidationError: rango invertido o fechas inválidas
            NotFoundError: la parcela no existe
            StoreFailure: error del store (se propaga tal cual)
        """
        try:
            inicio, fin = validar_rango(fecha_inicio, fecha_fin)
        except (ValueError, TypeError) as e:
            raise ValidationError(str(e)) from e

        store = StoreGateway(db)
        try:
            parcela = store.obtener_parcela(parcela_id)
            if not parcela:
                raise NotFoundError(f"Parcela {parcela_id} no encontrada")

            reservas = store.listar_reservas_vigentes(parcela.id, inicio, fin)
            reservas_en_conflicto = [
                r for r in reservas
                if hay_solapamiento(inicio, fin, r.fecha_inicio, r.fecha_fin)
            ]
            if reservas_en_conflicto:
                return DisponibilidadResponse(
                    disponible=False,
                    motivo=MOTIVO_RESERVADA,
                    conflicto=reservas_en_conflicto[0].to_dict()
                )

            estadias = store.listar_estadias_activas_en_parcela(parcela)
            estadias_en_conflicto = [
                e for e in estadias
                if hay_solapamiento(inicio, fin, e.fecha_ingreso, e.fecha_egreso_programada)
            ]
            if estadias_en_conflicto:
                return DisponibilidadResponse(
                    disponible=False,
                    motivo=MOTIVO_OCUPADA,
                    conflicto=estadias_en_conflicto[0].to_dict()
                )

            return DisponibilidadResponse(disponible=True)

        except StoreFailure as e:
            log_event(
                "disponibilidad", usuario, "Error al consultar disponibilidad", e.mensaje,
                level=logging.ERROR, parcela_id=parcela_id
            )
            raise

    @staticmethod
    def obtener_info_fusion(db: Session, parcela_id: int) -> Optional[FusionInfo]:
        """
        Si la parcela está ocupada por una estadía activa, arma el FusionInfo que el flujo
        de asignación necesita para fusionar con esa estadía. None si la parcela no está ocupada.

        Raises:
            NotFoundError: la parcela no existe
            StoreFailure: error del store
        """
        store = StoreGateway(db)
        parcela = store.obtener_parcela(parcela_id)
        if not parcela:
            raise NotFoundError(f"Parcela {parcela_id} no encontrada")

        if not parcela.esta_ocupada or not parcela.estadia_id:
            return None

        estadia = store.obtener_estadia(parcela.estadia_id)
        if not estadia or not estadia.is_active():
            return None

        responsable = next(
            (a for a in store.listar_acampantes(estadia.id) if a.es_responsable_pago),
            None
        )

        return FusionInfo(
            debe_fusionar=True,
            estadia_destino_id=estadia.id,
            celular_responsable=estadia.celular_responsable,
            responsable_nombre=responsable.nombre_completo if responsable else None,
            parcela_ocupada_id=parcela.id
        )
