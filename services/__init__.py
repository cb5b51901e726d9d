"""
Servicios del motor de ocupación de parcelas
"""

from .disponibilidad_service import AvailabilityService
from .fusion_service import StayMergeService
from .asignacion_service import PlotAssignmentService
from .checkout_service import StayCheckoutService

__all__ = [
    "AvailabilityService",
    "StayMergeService",
    "PlotAssignmentService",
    "StayCheckoutService"
]
