"""
Tests para los helpers de fechas (utils/fechas.py)
"""

from datetime import date, datetime

import pytest

from utils.fechas import hay_solapamiento, parse_to_date, validar_rango


class TestParseToDate:

    def test_con_string(self):
        assert parse_to_date("2026-01-15") == date(2026, 1, 15)
        assert parse_to_date("2026-01-15T23:59:59Z") == date(2026, 1, 15)

    def test_con_datetime(self):
        assert parse_to_date(datetime(2026, 6, 20, 14, 30)) == date(2026, 6, 20)

    def test_con_date(self):
        assert parse_to_date(date(2026, 3, 10)) == date(2026, 3, 10)

    def test_formato_invalido(self):
        with pytest.raises(ValueError):
            parse_to_date("15/01/2026")

    def test_none(self):
        with pytest.raises(ValueError):
            parse_to_date(None)


class TestSolapamiento:
    """Solapamiento inclusivo contra una reserva del 10 al 15 de enero"""

    RESERVA = (date(2026, 1, 10), date(2026, 1, 15))

    def test_solapamiento_parcial(self):
        assert hay_solapamiento(date(2026, 1, 12), date(2026, 1, 20), *self.RESERVA)

    def test_contencion_total(self):
        assert hay_solapamiento(date(2026, 1, 1), date(2026, 1, 31), *self.RESERVA)

    def test_adyacente_no_solapa(self):
        assert not hay_solapamiento(date(2026, 1, 16), date(2026, 1, 20), *self.RESERVA)

    def test_bordes_inclusivos(self):
        # El día de fin de la reserva cuenta como ocupado
        assert hay_solapamiento(date(2026, 1, 15), date(2026, 1, 18), *self.RESERVA)
        assert hay_solapamiento(date(2026, 1, 5), date(2026, 1, 10), *self.RESERVA)

    @pytest.mark.parametrize("a, b", [
        ((date(2026, 1, 1), date(2026, 1, 5)), (date(2026, 1, 3), date(2026, 1, 9))),
        ((date(2026, 1, 1), date(2026, 1, 5)), (date(2026, 1, 6), date(2026, 1, 9))),
        ((date(2026, 1, 1), date(2026, 1, 31)), (date(2026, 1, 10), date(2026, 1, 12))),
        ((date(2026, 2, 1), date(2026, 2, 1)), (date(2026, 1, 20), date(2026, 2, 1))),
    ])
    def test_simetria(self, a, b):
        assert hay_solapamiento(*a, *b) == hay_solapamiento(*b, *a)

    @pytest.mark.parametrize("rango", [
        (date(2026, 1, 1), date(2026, 1, 1)),
        (date(2026, 1, 1), date(2026, 3, 1)),
    ])
    def test_rango_solapa_consigo_mismo(self, rango):
        assert hay_solapamiento(*rango, *rango)

    def test_mezcla_datetime_y_date(self):
        assert hay_solapamiento(
            datetime(2026, 1, 15, 12, 0), datetime(2026, 1, 18, 12, 0), *self.RESERVA
        )

    def test_inicio_abierto(self):
        assert hay_solapamiento(date(2026, 1, 1), date(2026, 1, 2), None, date(2026, 1, 15))


class TestValidarRango:

    def test_rango_valido(self):
        assert validar_rango("2026-01-10", date(2026, 1, 12)) == (date(2026, 1, 10), date(2026, 1, 12))

    def test_mismo_dia(self):
        assert validar_rango(date(2026, 1, 10), date(2026, 1, 10)) == (date(2026, 1, 10), date(2026, 1, 10))

    def test_rango_invertido(self):
        with pytest.raises(ValueError):
            validar_rango(date(2026, 1, 12), date(2026, 1, 10))
