"""
Service de fusión de estadías
Se usa cuando un grupo entrante se asigna a una parcela que ya ocupa otra estadía activa:
- Mueve los acampantes de la estadía origen a la destino (como acompañantes)
- Suma los recursos (salvo que el entrante no traiga carpa)
- Transfiere las parcelas del origen al destino
- Cancela la estadía origen (nunca se borra, queda como historial)
Todo dentro de una única transacción.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from database.store import StoreGateway
from models.estadia import CAMPOS_RECURSOS, EstadoEstadia, TipoEventoEstadia
from schemas.parcelas import ResultadoFusion
from utils.errores import NotFoundError, OccupancyError, ValidationError
from utils.logging_utils import log_event


class StayMergeService:
    """Servicio para fusionar dos estadías que comparten parcela"""

    @staticmethod
    def fusionar_estadias(
        db: Session,
        estadia_origen_id: str,
        estadia_destino_id: str,
        sin_parcela: bool = False,
        usuario: str = "sistema"
    ) -> ResultadoFusion:
        """
        Fusiona la estadía origen (grupo entrante) en la destino (dueña de la parcela).

        Args:
            sin_parcela: True si el entrante no tiene carpa; sólo se mueven los acampantes
                y los totales del destino no cambian

        Returns:
            ResultadoFusion con exitoso=False y un mensaje legible ante cualquier error
        """
        store = StoreGateway(db)
        try:
            with store.transaccion():
                detalle = StayMergeService.aplicar_fusion(
                    store, estadia_origen_id, estadia_destino_id, sin_parcela, usuario
                )
        except OccupancyError as e:
            log_event(
                "fusion", usuario, "Error", e.mensaje, level=logging.WARNING,
                origen=estadia_origen_id, destino=estadia_destino_id, codigo=e.codigo
            )
            return ResultadoFusion(
                exitoso=False,
                error=e.mensaje,
                codigo_error=e.codigo,
                estadia_origen_id=estadia_origen_id,
                estadia_destino_id=estadia_destino_id
            )

        log_event(
            "fusion", usuario, "Fusionar estadías",
            origen=estadia_origen_id, destino=estadia_destino_id,
            acampantes=detalle["acampantes_reubicados"], sin_parcela=sin_parcela
        )
        return ResultadoFusion(exitoso=True, **detalle)

    @staticmethod
    def aplicar_fusion(
        store: StoreGateway,
        estadia_origen_id: str,
        estadia_destino_id: str,
        sin_parcela: bool,
        usuario: str
    ) -> dict:
        """
        Aplica la fusión sobre la transacción en curso (no hace commit).

        Raises:
            NotFoundError, ValidationError, ConflictError, StoreFailure
        """
        if estadia_origen_id == estadia_destino_id:
            raise ValidationError("Una estadía no puede fusionarse consigo misma")

        # 1. Obtener ambas estadías
        origen = store.obtener_estadia(estadia_origen_id)
        destino = store.obtener_estadia(estadia_destino_id)
        if not origen or not destino:
            raise NotFoundError("No se encontraron las estadías a fusionar")

        if not origen.is_active():
            raise ValidationError(f"La estadía de origen no está activa (está: {origen.estado_estadia})")
        if not destino.is_active():
            raise ValidationError(f"La estadía de destino no está activa (está: {destino.estado_estadia})")

        acampantes_origen = store.listar_acampantes(origen.id)
        responsable_origen_id = next(
            (a.id for a in acampantes_origen if a.es_responsable_pago), None
        )
        recursos_anteriores = destino.recursos()
        ahora = datetime.utcnow()

        # 2. Mover acampantes: siempre pasan a ser acompañantes del destino
        reubicados = store.reasignar_acampantes(origen.id, destino.id, destino.celular_responsable)

        # 3. Sumar recursos (sólo fusión completa)
        cambios_destino = {"actualizado_en": ahora}
        if not sin_parcela:
            recursos_origen = origen.recursos()
            for campo in CAMPOS_RECURSOS:
                cambios_destino[campo] = recursos_anteriores[campo] + recursos_origen[campo]
        if not destino.parcela_id and origen.parcela_id:
            cambios_destino["parcela_id"] = origen.parcela_id
        if not destino.parcela_asignada and origen.parcela_asignada:
            cambios_destino["parcela_asignada"] = origen.parcela_asignada
        store.actualizar(destino, usuario=usuario, **cambios_destino)

        # Las parcelas que apuntaban al origen pasan al destino
        parcelas_transferidas = []
        for parcela in store.listar_parcelas_de_estadia(origen.id):
            store.actualizar(parcela, usuario=usuario, estadia_id=destino.id)
            parcelas_transferidas.append(parcela.id)

        # 4. Cancelar origen (queda como historial)
        store.actualizar(
            origen, usuario=usuario,
            estado_estadia=EstadoEstadia.CANCELADA.value,
            actualizado_en=ahora
        )

        promovido_id = StayMergeService.normalizar_responsable(store, destino.id, responsable_origen_id)

        recursos_nuevos = destino.recursos()
        store.registrar_evento(destino.agregar_evento(
            TipoEventoEstadia.FUSION,
            usuario,
            descripcion=f"Estadía {origen.id} fusionada en esta estadía ({reubicados} acampantes)",
            payload={
                "estadia_origen_id": origen.id,
                "sin_parcela": sin_parcela,
                "acampantes_reubicados": [a.id for a in acampantes_origen],
                "recursos_anteriores": recursos_anteriores,
                "recursos_nuevos": recursos_nuevos,
                "parcelas_transferidas": parcelas_transferidas,
                "responsable_promovido_id": promovido_id
            }
        ))
        store.registrar_evento(origen.agregar_evento(
            TipoEventoEstadia.FUSION,
            usuario,
            descripcion=f"Estadía cancelada por fusión en {destino.id}",
            payload={"estadia_destino_id": destino.id}
        ))

        return {
            "estadia_origen_id": origen.id,
            "estadia_destino_id": destino.id,
            "acampantes_reubicados": reubicados,
            "recursos_sumados": not sin_parcela,
            "recursos_destino": recursos_nuevos
        }

    @staticmethod
    def normalizar_responsable(
        store: StoreGateway,
        estadia_id: str,
        candidato_id: Optional[str] = None
    ) -> Optional[str]:
        """
        Garantiza un único responsable de pago en la estadía.
        Si no queda ninguno se promueve al candidato (el ex responsable del origen) o,
        en su defecto, al acampante registrado primero.

        Returns:
            id del acampante promovido, o None si no hizo falta
        """
        acampantes = store.listar_acampantes(estadia_id)
        if not acampantes:
            return None

        promovido_id = None
        if not any(a.es_responsable_pago for a in acampantes):
            elegido = next((a for a in acampantes if a.id == candidato_id), acampantes[0])
            store.actualizar(elegido, es_responsable_pago=True)
            promovido_id = elegido.id

        StayMergeService.validar_responsable_unico(store, estadia_id)
        return promovido_id

    @staticmethod
    def validar_responsable_unico(store: StoreGateway, estadia_id: str) -> None:
        """
        Invariante: una estadía con acampantes tiene exactamente un responsable de pago.

        Raises:
            ValidationError si hay cero o más de uno
        """
        acampantes = store.listar_acampantes(estadia_id)
        if not acampantes:
            return
        responsables = sum(1 for a in acampantes if a.es_responsable_pago)
        if responsables != 1:
            raise ValidationError(
                f"La estadía {estadia_id} debe tener exactamente un responsable de pago (tiene {responsables})"
            )
