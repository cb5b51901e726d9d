"""
Service de egreso de estadías
Finaliza la estadía y libera sus parcelas. Si otra estadía activa sigue ubicada en la
misma parcela, la parcela pasa a esa estadía en lugar de quedar libre.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from database.store import StoreGateway
from models.estadia import EstadoEstadia, TipoEventoEstadia
from schemas.parcelas import ParcelaLiberada, ResultadoCheckout
from utils.errores import NotFoundError, OccupancyError, ValidationError
from utils.logging_utils import log_event
from utils.timezone import get_noon_timestamp


class StayCheckoutService:
    """Servicio para finalizar estadías y liberar parcelas"""

    @staticmethod
    def finalizar_estadia(
        db: Session,
        estadia_id: str,
        usuario: str = "sistema",
        fecha_egreso_real: Optional[datetime] = None
    ) -> ResultadoCheckout:
        """
        Finaliza la estadía: estado finalizada, fecha de egreso real (mediodía del día
        operativo) y liberación de parcelas, todo en una transacción.
        """
        store = StoreGateway(db)
        try:
            with store.transaccion():
                estadia = store.obtener_estadia(estadia_id)
                if not estadia:
                    raise NotFoundError(f"Estadía {estadia_id} no encontrada")
                if not estadia.is_active():
                    raise ValidationError(f"La estadía no está activa (está: {estadia.estado_estadia})")

                egreso = get_noon_timestamp(fecha_egreso_real)
                store.actualizar(
                    estadia, usuario=usuario,
                    estado_estadia=EstadoEstadia.FINALIZADA.value,
                    fecha_egreso_real=egreso,
                    actualizado_en=datetime.utcnow()
                )

                parcelas = []
                for parcela in store.listar_parcelas_de_estadia(estadia.id):
                    parcelas.append(StayCheckoutService.liberar_parcela(store, parcela, estadia, usuario))

                store.registrar_evento(estadia.agregar_evento(
                    TipoEventoEstadia.CHECKOUT,
                    usuario,
                    descripcion="Egreso realizado",
                    payload={
                        "fecha_egreso_real": egreso.isoformat(),
                        "parcelas": [p.model_dump() for p in parcelas]
                    }
                ))
        except OccupancyError as e:
            log_event(
                "checkout", usuario, "Error", e.mensaje, level=logging.WARNING,
                estadia_id=estadia_id, codigo=e.codigo
            )
            return ResultadoCheckout(exitoso=False, error=e.mensaje, codigo_error=e.codigo, estadia_id=estadia_id)

        log_event("checkout", usuario, "Finalizar estadía", estadia_id=estadia_id, parcelas=len(parcelas))
        return ResultadoCheckout(
            exitoso=True,
            estadia_id=estadia_id,
            fecha_egreso_real=egreso,
            parcelas=parcelas
        )

    @staticmethod
    def liberar_parcela(store: StoreGateway, parcela, estadia, usuario: str) -> ParcelaLiberada:
        """Libera la parcela o la cede a otra estadía activa ubicada en ella. No hace commit."""
        otras = store.listar_estadias_activas_en_parcela(parcela, excluir_estadia_id=estadia.id)
        if otras:
            heredera = otras[0]
            store.actualizar(parcela, usuario=usuario, estadia_id=heredera.id)
        else:
            parcela.liberar(usuario)
            store.flush()

        store.registrar_evento(estadia.agregar_evento(
            TipoEventoEstadia.LIBERACION_PARCELA,
            usuario,
            descripcion=f"Parcela {parcela.nombre_parcela} -> {parcela.estado}",
            payload={"parcela_id": parcela.id, "estadia_id": parcela.estadia_id}
        ))
        return ParcelaLiberada(
            parcela_id=parcela.id,
            nombre_parcela=parcela.nombre_parcela,
            estado=parcela.estado,
            estadia_id=parcela.estadia_id
        )
