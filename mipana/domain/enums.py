"""Domain enumerations."""

import enum


class Currency(str, enum.Enum):
    BS = "BS"  # local currency, bolívares
    USD = "USD"


class DriverStatus(str, enum.Enum):
    AVAILABLE = "available"
    BUSY = "busy"
    OFFLINE = "offline"


class RideStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Rides that count towards driver statistics
CLOSED_RIDE_STATUSES: frozenset[RideStatus] = frozenset(
    {RideStatus.COMPLETED, RideStatus.CANCELLED}
)


class PaymentMethod(str, enum.Enum):
    CASH = "efectivo"
    BANK_TRANSFER = "transferencia"
    MOBILE_PAYMENT = "pago_movil"


class ServiceType(str, enum.Enum):
    MOTOTAXI = "mototaxi"
    EL_PANA = "el_pana"
    EL_AMIGO = "el_amigo"
    FULL_PANA = "full_pana"


class StatsPeriod(str, enum.Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL_TIME = "all_time"
