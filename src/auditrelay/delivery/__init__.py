"""Delivery subsystem: collector transport and retry engine."""

from auditrelay.delivery.engine import DeliveryEngine
from auditrelay.delivery.sender import HttpSender
from auditrelay.delivery.sender import is_delivered
from auditrelay.delivery.sender import TransportError
from auditrelay.delivery.sender import UrllibHttpSender

__all__ = [
    "DeliveryEngine",
    "HttpSender",
    "TransportError",
    "UrllibHttpSender",
    "is_delivered",
]
