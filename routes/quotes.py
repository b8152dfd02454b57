"""
Quote routes.

Handles:
- /api/quotes/price - Price an order description (nothing is stored)
- /api/quotes - List/search and save quotes
- /api/quotes/<id> - Get or delete a saved quote
- /api/quotes/<id>/status - Mark a quote won, lost or pending
- /api/quotes/<id>/duplicate - Copy a quote under a new id
- /api/quotes/<id>/compare - Compare an order with a saved quote
- /api/customers - Quotes grouped by client
"""

from flask import Blueprint, request
from werkzeug.exceptions import BadRequest

from core.exceptions import InvalidOrderSettingError
from logging_config import get_logger
from models.saved_quote import QuoteStatus
from .helpers import get_quote_service, json_body, sanitize_text


# Module logger
logger = get_logger(__name__)

quotes_bp = Blueprint("quotes", __name__, url_prefix="/api")


def _order_payload(data):
    """Order description of a request: under ``order`` or the body itself."""
    order = data.get("order", data)
    if not isinstance(order, dict):
        raise BadRequest("'order' must be a JSON object")
    return order


@quotes_bp.route("/quotes/price", methods=["POST"])
def price():
    """
    Price an order.

    Body: order description (``line_items`` plus order settings, or a
    legacy camelCase record). Returns the normalized order with the quote,
    cost floor, profit and production breakdowns.
    """
    service = get_quote_service()
    order, priced = service.price_payload(_order_payload(json_body()))
    return {"order": order.to_dict(), **priced.to_dict()}


@quotes_bp.route("/quotes", methods=["GET"])
def list_quotes():
    """List saved quotes, newest first. Query: ``q`` (client/manager), ``status``."""
    service = get_quote_service()
    status = request.args.get("status") or None
    if status is not None:
        try:
            status = QuoteStatus(status)
        except ValueError:
            raise InvalidOrderSettingError(
                "status", status, f"must be one of {[s.value for s in QuoteStatus]}"
            ) from None

    quotes = service.store.search(sanitize_text(request.args.get("q", "")), status)
    return {
        "quotes": [quote.to_dict() for quote in quotes],
        "status_counts": service.store.status_counts(),
    }


@quotes_bp.route("/quotes", methods=["POST"])
def save_quote():
    """
    Save a quote.

    Body:
        client_name: Required
        account_manager: Optional (first manager if omitted)
        quote_id: Optional, updates an existing quote
        order: Order description
    """
    service = get_quote_service()
    data = json_body()
    order = service.build_order(_order_payload(data))

    saved = service.save_quote(
        order,
        client_name=sanitize_text(data.get("client_name", "")),
        account_manager=sanitize_text(data.get("account_manager", "")),
        quote_id=sanitize_text(data.get("quote_id", "")) or None,
    )
    return saved.to_dict(), 201


@quotes_bp.route("/quotes/<quote_id>", methods=["GET"])
def get_quote(quote_id: str):
    return get_quote_service().store.get(quote_id).to_dict()


@quotes_bp.route("/quotes/<quote_id>", methods=["DELETE"])
def delete_quote(quote_id: str):
    deleted = get_quote_service().store.delete(quote_id)
    return {"deleted": deleted.quote_id}


@quotes_bp.route("/quotes/<quote_id>/status", methods=["POST"])
def set_status(quote_id: str):
    """Body: ``{"status": "won" | "lost" | "pending"}``."""
    status = json_body().get("status")
    return get_quote_service().set_status(quote_id, status).to_dict()


@quotes_bp.route("/quotes/<quote_id>/duplicate", methods=["POST"])
def duplicate_quote(quote_id: str):
    return get_quote_service().duplicate_quote(quote_id).to_dict(), 201


@quotes_bp.route("/quotes/<quote_id>/compare", methods=["POST"])
def compare_quote(quote_id: str):
    """Compare the order in the body with a saved quote."""
    service = get_quote_service()
    order = service.build_order(_order_payload(json_body()))
    return service.compare(quote_id, order)


@quotes_bp.route("/customers", methods=["GET"])
def customers():
    store = get_quote_service().store
    return {
        "customers": store.customer_summaries(),
        "status_counts": store.status_counts(),
    }
