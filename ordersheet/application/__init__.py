"""Application layer module.

Contains application services (use cases) that orchestrate
catalog, selection, and export logic.
"""

from ordersheet.application.order_desk_service import (
    OrderDeskService,
    SelectionRepository,
    get_order_desk_service,
    reset_order_desk_service,
)

__all__ = [
    "OrderDeskService",
    "SelectionRepository",
    "get_order_desk_service",
    "reset_order_desk_service",
]
