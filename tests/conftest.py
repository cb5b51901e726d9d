"""
Configuración de pytest y fixtures
Cada test corre contra una base SQLite en memoria, nunca contra la base real.
"""

import os
import sys
import tempfile
from datetime import datetime, date

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Antes de importar la app: base en memoria y log a un archivo temporal
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("CAMPING_LOG_FILE", os.path.join(tempfile.gettempdir(), "camping_test_logs.txt"))

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.conexion import Base
import models  # registra las tablas en Base.metadata
from models import Acampante, Estadia, EstadoEstadia, EstadoParcela, EstadoReserva, Parcela, Reserva


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _activar_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


# ========== FÁBRICAS ==========

@pytest.fixture
def crear_parcela(db):
    def _crear(nombre, estado=EstadoParcela.LIBRE.value, estadia_id=None):
        parcela = Parcela(nombre_parcela=nombre, estado=estado, estadia_id=estadia_id)
        db.add(parcela)
        db.commit()
        return parcela
    return _crear


@pytest.fixture
def crear_estadia(db):
    def _crear(
        celular="1155550000",
        ingreso=datetime(2026, 1, 10, 12, 0),
        egreso=datetime(2026, 1, 15, 12, 0),
        estado=EstadoEstadia.ACTIVA.value,
        ingreso_confirmado=True,
        parcela_asignada=None,
        parcela_id=None,
        **recursos
    ):
        estadia = Estadia(
            celular_responsable=celular,
            fecha_ingreso=ingreso,
            fecha_egreso_programada=egreso,
            estado_estadia=estado,
            ingreso_confirmado=ingreso_confirmado,
            parcela_asignada=parcela_asignada,
            parcela_id=parcela_id,
            **recursos
        )
        db.add(estadia)
        db.commit()
        return estadia
    return _crear


@pytest.fixture
def crear_acampante(db):
    def _crear(estadia, nombre, celular=None, responsable=False, creado_en=None):
        acampante = Acampante(
            estadia_id=estadia.id,
            nombre_completo=nombre,
            celular=celular or f"11{abs(hash(nombre)) % 10**8:08d}",
            es_responsable_pago=responsable,
            celular_responsable=estadia.celular_responsable,
            creado_en=creado_en or datetime.utcnow()
        )
        db.add(acampante)
        db.commit()
        return acampante
    return _crear


@pytest.fixture
def crear_reserva(db):
    def _crear(parcela, inicio=date(2026, 1, 10), fin=date(2026, 1, 15), estado=EstadoReserva.CONFIRMADA.value):
        reserva = Reserva(
            parcela_id=parcela.id,
            fecha_inicio=inicio,
            fecha_fin=fin,
            nombre_responsable="Reserva Test",
            celular="1144443333",
            estado=estado
        )
        db.add(reserva)
        db.commit()
        return reserva
    return _crear
