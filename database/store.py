"""
Store Gateway
Interfaz transaccional acotada sobre estadías, acampantes, parcelas y reservas.
Los servicios del motor sólo acceden a la base a través de esta clase.
"""
import logging
from contextlib import contextmanager
from datetime import date
from functools import wraps
from typing import Iterator, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from models.estadia import Acampante, Estadia, EstadiaEvento, EstadoEstadia
from models.parcela import Parcela
from models.reserva import EstadoReserva, Reserva
from utils.errores import ConflictError, StoreFailure
from utils.logging_utils import log_event

MENSAJE_FALLA_STORE = "Error de acceso a datos. Intente nuevamente."
MENSAJE_CONFLICTO = "El registro fue modificado por otra operación. Recargue e intente nuevamente."


def _traducir_errores(func):
    """Convierte errores de SQLAlchemy en errores del dominio"""
    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except StaleDataError as e:
            log_event("store", "sistema", "Conflicto", str(e), level=logging.WARNING, operacion=func.__name__)
            raise ConflictError(MENSAJE_CONFLICTO) from e
        except SQLAlchemyError as e:
            log_event("store", "sistema", "Error", str(e), level=logging.ERROR, operacion=func.__name__)
            raise StoreFailure(MENSAJE_FALLA_STORE) from e
    return wrapper


class StoreGateway:
    """Gateway sobre una sesión SQLAlchemy"""

    def __init__(self, db: Session):
        self.db = db

    # ========== TRANSACCIÓN ==========

    @contextmanager
    def transaccion(self) -> Iterator["StoreGateway"]:
        """
        Unidad transaccional: commit al salir sin errores, rollback ante cualquier excepción.
        Todo lo que se haga dentro del bloque se aplica completo o no deja rastro.
        """
        try:
            yield self
            self.db.commit()
        except StaleDataError as e:
            self.db.rollback()
            log_event("store", "sistema", "Conflicto de concurrencia", str(e), level=logging.WARNING)
            raise ConflictError(MENSAJE_CONFLICTO) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            log_event("store", "sistema", "Rollback por error de store", str(e), level=logging.ERROR)
            raise StoreFailure(MENSAJE_FALLA_STORE) from e
        except Exception:
            self.db.rollback()
            raise

    @_traducir_errores
    def flush(self) -> None:
        self.db.flush()

    # ========== LECTURAS PUNTUALES ==========

    @_traducir_errores
    def obtener_estadia(self, estadia_id: str) -> Optional[Estadia]:
        return self.db.query(Estadia).filter(Estadia.id == estadia_id).first()

    @_traducir_errores
    def obtener_parcela(self, parcela_id: int) -> Optional[Parcela]:
        return self.db.query(Parcela).filter(Parcela.id == parcela_id).first()

    @_traducir_errores
    def obtener_acampante(self, acampante_id: str) -> Optional[Acampante]:
        return self.db.query(Acampante).filter(Acampante.id == acampante_id).first()

    @_traducir_errores
    def obtener_reserva(self, reserva_id: str) -> Optional[Reserva]:
        return self.db.query(Reserva).filter(Reserva.id == reserva_id).first()

    # ========== LECTURAS FILTRADAS ==========

    @_traducir_errores
    def listar_reservas_vigentes(self, parcela_id: int, desde: date, hasta: date) -> List[Reserva]:
        """Reservas no canceladas de la parcela que tocan el rango [desde, hasta]"""
        return self.db.query(Reserva).filter(
            Reserva.parcela_id == parcela_id,
            Reserva.estado != EstadoReserva.CANCELADA.value,
            Reserva.fecha_inicio <= hasta,
            Reserva.fecha_fin >= desde
        ).order_by(Reserva.fecha_inicio, Reserva.id).all()

    @_traducir_errores
    def listar_estadias_activas_en_parcela(
        self,
        parcela: Parcela,
        excluir_estadia_id: Optional[str] = None
    ) -> List[Estadia]:
        """
        Estadías activas con ingreso confirmado ubicadas en la parcela.
        Se vinculan por parcela_id o, por compatibilidad, por el nombre guardado en parcela_asignada.
        """
        query = self.db.query(Estadia).filter(
            Estadia.estado_estadia == EstadoEstadia.ACTIVA.value,
            Estadia.ingreso_confirmado.is_(True),
            or_(
                Estadia.parcela_id == parcela.id,
                Estadia.parcela_asignada == parcela.nombre_parcela
            )
        )
        if excluir_estadia_id:
            query = query.filter(Estadia.id != excluir_estadia_id)
        return query.order_by(Estadia.fecha_ingreso, Estadia.id).all()

    @_traducir_errores
    def listar_acampantes(self, estadia_id: str) -> List[Acampante]:
        return self.db.query(Acampante).filter(
            Acampante.estadia_id == estadia_id
        ).order_by(Acampante.creado_en, Acampante.id).all()

    @_traducir_errores
    def listar_parcelas_de_estadia(self, estadia_id: str) -> List[Parcela]:
        return self.db.query(Parcela).filter(
            Parcela.estadia_id == estadia_id
        ).order_by(Parcela.id).all()

    # ========== ESCRITURAS ==========

    @_traducir_errores
    def reasignar_acampantes(self, estadia_origen_id: str, estadia_destino_id: str, celular_responsable: str) -> int:
        """
        Mueve todos los acampantes de una estadía a otra, como acompañantes.
        Returns: cantidad de filas actualizadas
        """
        filas = self.db.query(Acampante).filter(
            Acampante.estadia_id == estadia_origen_id
        ).update(
            {
                Acampante.estadia_id: estadia_destino_id,
                Acampante.celular_responsable: celular_responsable,
                Acampante.es_responsable_pago: False,
            },
            synchronize_session="fetch"
        )
        self.db.flush()
        return filas

    @_traducir_errores
    def actualizar(self, registro, usuario: Optional[str] = None, **campos):
        """Actualiza campos de un registro y hace flush (aplica el control de versión)"""
        for campo, valor in campos.items():
            setattr(registro, campo, valor)
        if usuario is not None and hasattr(registro, "actualizado_por"):
            registro.actualizado_por = usuario
        self.db.flush()
        return registro

    @_traducir_errores
    def registrar_evento(self, evento: EstadiaEvento) -> EstadiaEvento:
        self.db.add(evento)
        self.db.flush()
        return evento
