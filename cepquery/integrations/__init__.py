"""
Integrations with third-party libraries like Pydantic and FastAPI.
"""

from .pydantic import PydanticPaymentDetails, from_dataclass
from .fastapi import get_lookup_criteria, get_payment_details

__all__ = ["from_dataclass", "PydanticPaymentDetails", "get_payment_details", "get_lookup_criteria"]
