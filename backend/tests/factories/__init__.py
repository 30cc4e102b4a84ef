# backend/tests/factories/__init__.py

"""
Shared test factories for the loyalty and kitchen routing backend.
"""

from .base import BaseFactory, bind_session
from .loyalty import LoyaltyAccountFactory
from .kds import (
    StationFactory,
    StationAssignmentFactory,
    OrderLineFactory,
    KitchenOrderFactory,
)

__all__ = [
    # Base
    'BaseFactory',
    'bind_session',

    # Loyalty
    'LoyaltyAccountFactory',

    # Kitchen routing
    'StationFactory',
    'StationAssignmentFactory',
    'OrderLineFactory',
    'KitchenOrderFactory',
]
