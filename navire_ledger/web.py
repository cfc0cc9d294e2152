"""HTTP interface of the ledger and the command that serves it."""

from __future__ import annotations

import argparse
import logging
from typing import Any, Awaitable, Callable, Optional, Sequence

from aiohttp import web
from dotenv import load_dotenv
from pydantic import ValidationError

from navire_ledger.bodies import AddExpenseRequest, PaymentReceivedRequest
from navire_ledger.commands import (
    AddExpenseCommand,
    AddExpenseHandler,
    ReceivePaymentCommand,
    ReceivePaymentHandler,
)
from navire_ledger.domain import InvalidAmountError
from navire_ledger.ports import (
    DateProvider,
    EventStream,
    ExpenseRepository,
    IdProvider,
    PaymentRepository,
)
from navire_ledger.queries import GetExpensesDataQuery, GetExpensesDataQueryHandler

API_PREFIX = "/api/v1/ledger"
ONE_TIME_DROPDOWN_VALUE = "ponctuel"
INCOME_OPERATION = "income"
CORS_MAX_AGE = 3600
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080

logger = logging.getLogger(__name__)

_Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def payment_type_for(body: PaymentReceivedRequest) -> str:
    """Return "one-time" or "recurring" from the second custom field's dropdown."""
    fields = body.data.object.custom_fields
    if len(fields) < 2:
        raise ValueError("payment body has no payment type field")
    dropdown = fields[1].dropdown
    if dropdown is None:
        raise ValueError("payment type field has no dropdown value")
    return "one-time" if dropdown.value == ONE_TIME_DROPDOWN_VALUE else "recurring"


def _allow_origin(response: web.StreamResponse, origin: str) -> None:
    response.headers["Access-Control-Allow-Origin"] = origin
    response.headers["Access-Control-Allow-Credentials"] = "true"
    response.headers["Vary"] = "Origin"


@web.middleware
async def _cors_middleware(request: web.Request, handler: _Handler) -> web.StreamResponse:
    origin = request.headers.get("Origin")
    if origin is None:
        return await handler(request)
    requested_method = request.headers.get("Access-Control-Request-Method")
    if request.method == "OPTIONS" and requested_method is not None:
        response: web.StreamResponse = web.Response()
        response.headers["Access-Control-Allow-Methods"] = requested_method
        requested_headers = request.headers.get("Access-Control-Request-Headers")
        if requested_headers:
            response.headers["Access-Control-Allow-Headers"] = requested_headers
        response.headers["Access-Control-Max-Age"] = str(CORS_MAX_AGE)
    else:
        response = await handler(request)
    _allow_origin(response, origin)
    return response


def create_app(
    payment_repository: PaymentRepository,
    expense_repository: ExpenseRepository,
    id_provider: IdProvider,
    date_provider: DateProvider,
    event_stream: EventStream,
    query_handler: Optional[Any] = None,
) -> web.Application:
    """Build the web application serving the ledger routes."""
    receive_payment_handler = ReceivePaymentHandler(
        payment_repository=payment_repository,
        id_provider=id_provider,
        date_provider=date_provider,
        expense_repository=expense_repository,
        event_stream=event_stream,
    )
    add_expense_handler = AddExpenseHandler(
        repository=expense_repository,
        id_provider=id_provider,
        date_provider=date_provider,
        event_stream=event_stream,
    )

    async def receive_payment(request: web.Request) -> web.Response:
        try:
            body = PaymentReceivedRequest.model_validate_json(await request.read())
        except ValidationError as exc:
            raise web.HTTPBadRequest(text=str(exc)) from exc
        try:
            payment_type = payment_type_for(body)
        except ValueError:
            logger.exception("Cannot read payment type")
            return web.Response(status=500)
        session = body.data.object
        command = ReceivePaymentCommand(
            amount=float(session.amount_total),
            name=session.customer_details.name,
            email=session.customer_details.email,
            payment_type=payment_type,
        )
        try:
            await receive_payment_handler.execute(command)
        except InvalidAmountError:
            return web.Response(status=500)
        return web.Response()

    async def add_expense(request: web.Request) -> web.Response:
        try:
            body = AddExpenseRequest.model_validate_json(await request.read())
        except ValidationError as exc:
            raise web.HTTPBadRequest(text=str(exc)) from exc
        command = AddExpenseCommand(amount=body.data.amount)
        if body.data.operation_type == INCOME_OPERATION:
            return web.Response()
        try:
            await add_expense_handler.execute(command)
        except InvalidAmountError:
            return web.Response(status=500)
        return web.Response()

    async def get_expenses_data(request: web.Request) -> web.Response:
        handler = query_handler if query_handler is not None else GetExpensesDataQueryHandler()
        response = await handler.execute(GetExpensesDataQuery())
        return web.json_response(response.to_dict())

    app = web.Application(middlewares=[_cors_middleware])
    app.router.add_post(f"{API_PREFIX}/payments-received", receive_payment)
    app.router.add_post(f"{API_PREFIX}/expenses", add_expense)
    app.router.add_get(f"{API_PREFIX}/expenses-data", get_expenses_data)
    return app


async def _build_app() -> web.Application:
    from navire_ledger.providers import RealDateProvider, RealIdProvider
    from navire_ledger.sql_repositories import SqlExpenseRepository, SqlPaymentRepository
    from navire_ledger.websocket_stream import WebSocketEventStream

    event_stream = await WebSocketEventStream.connect()
    app = create_app(
        payment_repository=SqlPaymentRepository(),
        expense_repository=SqlExpenseRepository(),
        id_provider=RealIdProvider(),
        date_provider=RealDateProvider(),
        event_stream=event_stream,
        query_handler=GetExpensesDataQueryHandler(),
    )

    async def close_stream(_app: web.Application) -> None:
        await event_stream.close()

    app.on_cleanup.append(close_stream)
    logger.info("Starting web server...")
    return app


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Serve the ledger API."""
    parser = argparse.ArgumentParser(description="Serve the ledger HTTP API.")
    parser.add_argument("--host", default=DEFAULT_HOST, help="address to bind")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to bind")
    args = parser.parse_args(argv)

    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    web.run_app(_build_app(), host=args.host, port=args.port)
    return 0