from datetime import datetime
import pytz

from config import CAMPING_TIMEZONE

# Zona horaria centralizada del predio
CAMPING_TZ = pytz.timezone(CAMPING_TIMEZONE)


def get_camping_now() -> datetime:
    """Returns current time in the site timezone"""
    return datetime.now(CAMPING_TZ)


def to_camping_time(dt: datetime) -> datetime:
    """Converts a datetime to the site timezone; naive values are site wall-clock time"""
    if dt.tzinfo is None:
        return CAMPING_TZ.localize(dt)
    return dt.astimezone(CAMPING_TZ)


def get_noon_timestamp(dt: datetime = None) -> datetime:
    """
    Mediodía (12:00) del día operativo en la zona del predio, como datetime naive.
    Todos los registros de egreso se normalizan a esta hora.
    """
    local = to_camping_time(dt) if dt else get_camping_now()
    return local.replace(hour=12, minute=0, second=0, microsecond=0, tzinfo=None)
