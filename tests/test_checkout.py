"""
Tests para StayCheckoutService
"""

from datetime import datetime

import pytest
import pytz

from database.store import StoreGateway
from models import EstadiaEvento, EstadoEstadia, EstadoParcela
from services import StayCheckoutService


def test_finaliza_y_libera_parcela(db, crear_estadia, crear_parcela):
    estadia = crear_estadia(parcela_asignada="A1")
    a1 = crear_parcela("A1", estado=EstadoParcela.OCUPADA.value, estadia_id=estadia.id)

    resultado = StayCheckoutService.finalizar_estadia(db, estadia.id, usuario="recepcion")

    assert resultado.exitoso is True
    assert [p.estado for p in resultado.parcelas] == [EstadoParcela.LIBRE.value]

    store = StoreGateway(db)
    assert store.obtener_estadia(estadia.id).estado_estadia == EstadoEstadia.FINALIZADA.value
    parcela = store.obtener_parcela(a1.id)
    assert parcela.estado == EstadoParcela.LIBRE.value
    assert parcela.estadia_id is None


@pytest.mark.parametrize("egreso", [
    datetime(2026, 1, 15),
    datetime(2026, 1, 15, 1, 30),
    datetime(2026, 1, 15, 18, 30),
    datetime(2026, 1, 15, 23, 59),
])
def test_egreso_sin_zona_conserva_el_dia(db, crear_estadia, egreso):
    estadia = crear_estadia()

    resultado = StayCheckoutService.finalizar_estadia(db, estadia.id, fecha_egreso_real=egreso)

    assert resultado.fecha_egreso_real == datetime(2026, 1, 15, 12, 0)
    assert StoreGateway(db).obtener_estadia(estadia.id).fecha_egreso_real == datetime(2026, 1, 15, 12, 0)


def test_egreso_en_utc_se_convierte_al_dia_del_predio(db, crear_estadia):
    estadia = crear_estadia()

    # 01:30 UTC del 16 son las 22:30 del 15 en Buenos Aires
    resultado = StayCheckoutService.finalizar_estadia(
        db, estadia.id, fecha_egreso_real=pytz.utc.localize(datetime(2026, 1, 16, 1, 30))
    )

    assert resultado.fecha_egreso_real == datetime(2026, 1, 15, 12, 0)


def test_parcela_compartida_pasa_a_la_otra_estadia(db, crear_estadia, crear_parcela):
    saliente = crear_estadia(celular="1100000001", parcela_asignada="A1")
    que_sigue = crear_estadia(celular="1100000002", parcela_asignada="A1")
    a1 = crear_parcela("A1", estado=EstadoParcela.OCUPADA.value, estadia_id=saliente.id)

    resultado = StayCheckoutService.finalizar_estadia(db, saliente.id)

    assert resultado.exitoso is True
    assert resultado.parcelas[0].estadia_id == que_sigue.id
    parcela = StoreGateway(db).obtener_parcela(a1.id)
    assert parcela.estado == EstadoParcela.OCUPADA.value
    assert parcela.estadia_id == que_sigue.id


def test_pre_registro_no_hereda_la_parcela(db, crear_estadia, crear_parcela):
    saliente = crear_estadia(celular="1100000001", parcela_asignada="A1")
    crear_estadia(celular="1100000002", parcela_asignada="A1", ingreso_confirmado=False)
    a1 = crear_parcela("A1", estado=EstadoParcela.OCUPADA.value, estadia_id=saliente.id)

    StayCheckoutService.finalizar_estadia(db, saliente.id)

    assert StoreGateway(db).obtener_parcela(a1.id).estado == EstadoParcela.LIBRE.value


def test_registra_eventos(db, crear_estadia, crear_parcela):
    estadia = crear_estadia(parcela_asignada="A1")
    crear_parcela("A1", estado=EstadoParcela.OCUPADA.value, estadia_id=estadia.id)

    StayCheckoutService.finalizar_estadia(db, estadia.id)

    tipos = sorted(e.tipo_evento for e in db.query(EstadiaEvento).filter(EstadiaEvento.estadia_id == estadia.id))
    assert tipos == ["CHECKOUT", "LIBERACION_PARCELA"]


def test_estadia_no_activa(db, crear_estadia):
    estadia = crear_estadia(estado=EstadoEstadia.CANCELADA.value)

    resultado = StayCheckoutService.finalizar_estadia(db, estadia.id)

    assert resultado.exitoso is False
    assert resultado.codigo_error == "validation_error"
    assert db.query(EstadiaEvento).count() == 0


def test_estadia_inexistente(db):
    resultado = StayCheckoutService.finalizar_estadia(db, "no-existe")

    assert resultado.exitoso is False
    assert resultado.codigo_error == "not_found"
