"""Application use cases."""

from billdesk.application.use_cases.load_stock import LoadStockAvailabilityUseCase
from billdesk.application.use_cases.submit_bill import SubmitBillUseCase
from billdesk.application.use_cases.transition_order import TransitionOrderUseCase

__all__ = [
    "LoadStockAvailabilityUseCase",
    "SubmitBillUseCase",
    "TransitionOrderUseCase",
]
