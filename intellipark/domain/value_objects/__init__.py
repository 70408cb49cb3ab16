"""Value objects of the parking domain."""

from intellipark.domain.value_objects.stay_duration import StayDuration
from intellipark.domain.value_objects.tariff import Tariff

__all__ = [
    "StayDuration",
    "Tariff",
]
