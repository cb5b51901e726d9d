"""
Helpers de fechas para el control de ocupación
Todas las comparaciones de rangos se hacen por día calendario
"""

from datetime import date, datetime
from typing import Optional, Union

FechaLike = Union[date, datetime, str]


def parse_to_date(value: FechaLike) -> date:
    """Convierte string/datetime/date a date"""
    if value is None:
        raise ValueError("Date value is None")

    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace('Z', '+00:00')).date()
        except ValueError:
            try:
                return datetime.strptime(value, '%Y-%m-%d').date()
            except ValueError:
                raise ValueError(f"Invalid date format: {value}")

    raise TypeError(f"Unsupported date type: {type(value)}")


def hay_solapamiento(
    inicio_a: Optional[FechaLike],
    fin_a: Optional[FechaLike],
    inicio_b: Optional[FechaLike],
    fin_b: Optional[FechaLike]
) -> bool:
    """
    Solapamiento inclusivo de dos rangos: inicio_a <= fin_b AND fin_a >= inicio_b.
    Un extremo None se toma como abierto (sin límite de ese lado).
    """
    a_ini = parse_to_date(inicio_a) if inicio_a is not None else None
    a_fin = parse_to_date(fin_a) if fin_a is not None else None
    b_ini = parse_to_date(inicio_b) if inicio_b is not None else None
    b_fin = parse_to_date(fin_b) if fin_b is not None else None

    empieza_antes_del_fin = a_ini is None or b_fin is None or a_ini <= b_fin
    termina_despues_del_inicio = a_fin is None or b_ini is None or a_fin >= b_ini
    return empieza_antes_del_fin and termina_despues_del_inicio


def validar_rango(fecha_inicio: FechaLike, fecha_fin: FechaLike) -> tuple:
    """
    Normaliza y valida un rango candidato.

    Returns:
        (inicio, fin) como date

    Raises:
        ValueError: si el rango está invertido o alguna fecha es inválida
    """
    inicio = parse_to_date(fecha_inicio)
    fin = parse_to_date(fecha_fin)
    if inicio > fin:
        raise ValueError("La fecha de inicio debe ser anterior o igual a la fecha de fin")
    return inicio, fin
