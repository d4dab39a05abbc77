"""HTTP error mapping for the shipment API.

Domain errors use Protean's standard mapping; the two workflow
precondition failures carry the affected orders so the console can ask for
confirmation or explain the block.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers as register_domain_exception_handlers

from shipment.workflow.exceptions import CannotReverseDeliveredPartial, IncompleteOrderRequiresConfirmation


async def _incomplete_orders(request: Request, exc: IncompleteOrderRequiresConfirmation) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={"error": "confirmation_required", "message": str(exc), "shortfalls": exc.shortfalls},
    )


async def _blocked_reversal(request: Request, exc: CannotReverseDeliveredPartial) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={"error": "reversal_blocked", "message": str(exc), "order_ids": exc.order_ids},
    )


def register_exception_handlers(app: FastAPI) -> None:
    register_domain_exception_handlers(app)
    app.add_exception_handler(IncompleteOrderRequiresConfirmation, _incomplete_orders)
    app.add_exception_handler(CannotReverseDeliveredPartial, _blocked_reversal)
