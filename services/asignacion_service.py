"""
Service de asignación de parcelas
Marca parcelas como ocupadas por una estadía. Si el flujo de check-in confirmó que la
parcela se comparte con otra estadía, primero fusiona y asigna a la estadía destino.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from database.store import StoreGateway
from models.estadia import TipoEventoEstadia
from models.parcela import EstadoParcela
from schemas.parcelas import FusionInfo, ResultadoAsignacion
from services.fusion_service import StayMergeService
from utils.errores import ConflictError, NotFoundError, OccupancyError, ValidationError
from utils.logging_utils import log_event


class PlotAssignmentService:
    """Servicio para asignar parcelas a una estadía (con fusión opcional)"""

    @staticmethod
    def asignar_parcelas(
        db: Session,
        estadia_id: str,
        parcela_ids: List[int],
        fusion_info: Optional[FusionInfo] = None,
        cant_parcelas: Optional[int] = None,
        usuario: str = "sistema"
    ) -> ResultadoAsignacion:
        """
        Asigna las parcelas a la estadía.

        Con fusion_info.debe_fusionar:
            - sin_parcela = (cant_parcelas == 0)
            - fusiona estadia_id en fusion_info.estadia_destino_id
            - las parcelas quedan a nombre de la estadía destino
        Sin fusión: las parcelas quedan a nombre de estadia_id.

        Una lista vacía de parcelas no es error. Todo ocurre en una transacción:
        si falla la fusión o cualquier parcela, no queda ningún cambio aplicado.
        """
        debe_fusionar = bool(fusion_info and fusion_info.debe_fusionar)
        estadia_receptora_id = fusion_info.estadia_destino_id if debe_fusionar else estadia_id

        store = StoreGateway(db)
        try:
            with store.transaccion():
                if debe_fusionar:
                    sin_parcela = cant_parcelas == 0
                    StayMergeService.aplicar_fusion(
                        store, estadia_id, estadia_receptora_id, sin_parcela, usuario
                    )

                asignadas = PlotAssignmentService.ocupar_parcelas(
                    store, estadia_receptora_id, parcela_ids, usuario
                )
        except OccupancyError as e:
            log_event(
                "asignacion", usuario, "Error", e.mensaje, level=logging.WARNING,
                estadia_id=estadia_id, parcelas=parcela_ids, fusion=debe_fusionar, codigo=e.codigo
            )
            return ResultadoAsignacion(
                exitoso=False,
                error=e.mensaje,
                codigo_error=e.codigo,
                fusionada=False
            )

        log_event(
            "asignacion", usuario, "Asignar parcelas",
            estadia_id=estadia_receptora_id, parcelas=asignadas, fusion=debe_fusionar
        )
        return ResultadoAsignacion(
            exitoso=True,
            fusionada=debe_fusionar,
            estadia_id=estadia_receptora_id,
            parcelas_asignadas=asignadas
        )

    @staticmethod
    def ocupar_parcelas(
        store: StoreGateway,
        estadia_id: str,
        parcela_ids: List[int],
        usuario: str
    ) -> List[int]:
        """
        Marca cada parcela como ocupada por la estadía, en el orden recibido.
        No hace commit.

        Raises:
            NotFoundError: estadía o parcela inexistente
            ValidationError: estadía no activa o parcela en mantenimiento
            ConflictError: parcela ocupada por otra estadía (corresponde fusionar)
        """
        estadia = store.obtener_estadia(estadia_id)
        if not estadia:
            raise NotFoundError(f"Estadía {estadia_id} no encontrada")
        if not estadia.is_active():
            raise ValidationError(f"La estadía no está activa (está: {estadia.estado_estadia})")

        asignadas = []
        for parcela_id in dict.fromkeys(parcela_ids):
            parcela = store.obtener_parcela(parcela_id)
            if not parcela:
                raise NotFoundError(f"Parcela {parcela_id} no encontrada")

            if parcela.estado == EstadoParcela.MANTENIMIENTO.value:
                raise ValidationError(f"La parcela {parcela.nombre_parcela} está en mantenimiento")

            if parcela.esta_ocupada and parcela.estadia_id != estadia.id:
                raise ConflictError(
                    f"La parcela {parcela.nombre_parcela} está ocupada por otra estadía. "
                    "Confirme la fusión para compartirla."
                )

            if not (parcela.esta_ocupada and parcela.estadia_id == estadia.id):
                parcela.ocupar(estadia.id, usuario)
                store.flush()
            asignadas.append(parcela.id)

        if asignadas:
            primera = store.obtener_parcela(asignadas[0])
            cambios = {}
            if not estadia.parcela_id:
                cambios["parcela_id"] = primera.id
            if not estadia.parcela_asignada:
                cambios["parcela_asignada"] = primera.nombre_parcela
            if cambios:
                store.actualizar(estadia, usuario=usuario, actualizado_en=datetime.utcnow(), **cambios)

            store.registrar_evento(estadia.agregar_evento(
                TipoEventoEstadia.ASIGNACION_PARCELAS,
                usuario,
                descripcion=f"Parcelas asignadas: {asignadas}",
                payload={"parcela_ids": asignadas}
            ))

        return asignadas
