from contextlib import asynccontextmanager

import pytest
from aiohttp.test_utils import TestClient, TestServer

from navire_ledger.bodies import PaymentReceivedRequest
from navire_ledger.memory import (
    InMemoryEventStream,
    InMemoryExpenseRepository,
    InMemoryPaymentRepository,
)
from navire_ledger.providers import FixedDateProvider, FixedIdProvider
from navire_ledger.queries import (
    GetExpensesDataQueryResponse,
    PaymentSummary,
    TopContributor,
)
from navire_ledger.web import API_PREFIX, CORS_MAX_AGE, create_app, main, payment_type_for


def _payment_document(amount_total=2000, dropdown_value="ponctuel", with_dropdown=True):
    dropdown = (
        {
            "options": [
                {"label": "Ponctuel", "value": "ponctuel"},
                {"label": "Mensuel", "value": "mensuel"},
            ],
            "value": dropdown_value,
        }
        if with_dropdown
        else None
    )
    return {
        "data": {
            "object": {
                "id": "cs_test_placeholder",
                "object": "checkout.session",
                "adaptive_pricing": {"enabled": False},
                "amount_subtotal": amount_total,
                "amount_total": amount_total,
                "automatic_tax": {"enabled": False},
                "custom_fields": [
                    {
                        "key": "nom",
                        "label": {"custom": "Nom", "type": "custom"},
                        "text": {"value": "John"},
                    },
                    {
                        "key": "frequence",
                        "label": {"custom": "Frequence", "type": "custom"},
                        "dropdown": dropdown,
                    },
                ],
                "customer_details": {
                    "address": {"country": "FR"},
                    "email": "john.doe@example.com",
                    "name": "John Doe",
                    "tax_exempt": "none",
                    "tax_ids": [],
                },
            }
        }
    }


class _StubQueryHandler:
    def __init__(self, response):
        self.response = response
        self.calls = 0

    async def execute(self, query):
        self.calls += 1
        return self.response


class _Ports:
    def __init__(self, query_handler=None):
        self.payments = InMemoryPaymentRepository()
        self.expenses = InMemoryExpenseRepository()
        self.events = InMemoryEventStream()
        self.query_handler = query_handler

    def kwargs(self):
        return {
            "payment_repository": self.payments,
            "expense_repository": self.expenses,
            "id_provider": FixedIdProvider(),
            "date_provider": FixedDateProvider(),
            "event_stream": self.events,
            "query_handler": self.query_handler,
        }


@asynccontextmanager
async def _serve(app):
    async with TestClient(TestServer(app)) as client:
        yield client


def test_payment_type_one_time():
    body = PaymentReceivedRequest.model_validate(_payment_document())
    assert payment_type_for(body) == "one-time"


def test_payment_type_recurring():
    body = PaymentReceivedRequest.model_validate(_payment_document(dropdown_value="mensuel"))
    assert payment_type_for(body) == "recurring"


def test_payment_type_without_dropdown_raises():
    body = PaymentReceivedRequest.model_validate(_payment_document(with_dropdown=False))
    with pytest.raises(ValueError):
        payment_type_for(body)


def test_main_help_exits_cleanly():
    with pytest.raises(SystemExit) as excinfo:
        main(["--help"])
    assert excinfo.value.code == 0


@pytest.mark.asyncio
async def test_add_expense_records_expense_and_event():
    ports = _Ports()
    app = create_app(**ports.kwargs())
    async with _serve(app) as client:
        resp = await client.post(
            f"{API_PREFIX}/expenses",
            json={"data": {"amount": 100.0, "operationType": "expense"}},
        )
        assert resp.status == 200
    assert len(ports.expenses.expenses) == 1
    assert ports.expenses.expenses[0].id == "123"
    assert ports.expenses.expenses[0].date == "2021-01-01"
    assert ports.expenses.expenses[0].amount.value == 100.0
    assert ports.events.events == ["expense-added"]


@pytest.mark.asyncio
async def test_add_expense_ignores_income():
    ports = _Ports()
    app = create_app(**ports.kwargs())
    async with _serve(app) as client:
        resp = await client.post(
            f"{API_PREFIX}/expenses",
            json={"data": {"amount": 100.0, "operationType": "income"}},
        )
        assert resp.status == 200
    assert ports.expenses.expenses == []
    assert ports.events.events == []


@pytest.mark.asyncio
async def test_add_expense_negative_amount_is_server_error():
    ports = _Ports()
    app = create_app(**ports.kwargs())
    async with _serve(app) as client:
        resp = await client.post(
            f"{API_PREFIX}/expenses",
            json={"data": {"amount": -100.0, "operationType": "expense"}},
        )
        assert resp.status == 500
    assert ports.expenses.expenses == []


@pytest.mark.asyncio
async def test_add_expense_malformed_body_is_rejected():
    ports = _Ports()
    app = create_app(**ports.kwargs())
    async with _serve(app) as client:
        resp = await client.post(f"{API_PREFIX}/expenses", data=b"{not json")
        assert resp.status == 400
    assert ports.expenses.expenses == []


@pytest.mark.asyncio
async def test_payment_received_records_payment_and_tax_expense():
    ports = _Ports()
    app = create_app(**ports.kwargs())
    async with _serve(app) as client:
        resp = await client.post(f"{API_PREFIX}/payments-received", json=_payment_document())
        assert resp.status == 200
    assert len(ports.payments.payments) == 1
    payment = ports.payments.payments[0]
    assert payment.amount.value == 2000.0
    assert payment.name == "John Doe"
    assert payment.email == "john.doe@example.com"
    assert payment.payment_type == "one-time"
    assert len(ports.expenses.expenses) == 1
    assert ports.events.events == ["payment-received"]


@pytest.mark.asyncio
async def test_payment_received_recurring_type():
    ports = _Ports()
    app = create_app(**ports.kwargs())
    async with _serve(app) as client:
        resp = await client.post(
            f"{API_PREFIX}/payments-received",
            json=_payment_document(dropdown_value="mensuel"),
        )
        assert resp.status == 200
    assert ports.payments.payments[0].payment_type == "recurring"


@pytest.mark.asyncio
async def test_payment_received_negative_amount_is_server_error():
    ports = _Ports()
    app = create_app(**ports.kwargs())
    async with _serve(app) as client:
        resp = await client.post(
            f"{API_PREFIX}/payments-received", json=_payment_document(amount_total=-100)
        )
        assert resp.status == 500
    assert ports.payments.payments == []
    assert ports.events.events == []


@pytest.mark.asyncio
async def test_payment_received_without_dropdown_is_server_error():
    ports = _Ports()
    app = create_app(**ports.kwargs())
    async with _serve(app) as client:
        resp = await client.post(
            f"{API_PREFIX}/payments-received", json=_payment_document(with_dropdown=False)
        )
        assert resp.status == 500
    assert ports.payments.payments == []


@pytest.mark.asyncio
async def test_expenses_data_returns_query_response():
    response = GetExpensesDataQueryResponse(
        total_revenue=2000,
        total_expenses=400,
        total_received=2000,
        payments=[
            PaymentSummary(
                amount=2000,
                name="John Doe",
                email="john.doe@example.com",
                payment_type="one-time",
            )
        ],
        top_contributors=[TopContributor(amount=2000, name="John Doe")],
    )
    stub = _StubQueryHandler(response)
    ports = _Ports(query_handler=stub)
    app = create_app(**ports.kwargs())
    async with _serve(app) as client:
        resp = await client.get(f"{API_PREFIX}/expenses-data")
        assert resp.status == 200
        assert await resp.json() == response.to_dict()
    assert stub.calls == 1


@pytest.mark.asyncio
async def test_cors_preflight_allows_any_origin():
    ports = _Ports()
    app = create_app(**ports.kwargs())
    async with _serve(app) as client:
        resp = await client.options(
            f"{API_PREFIX}/expenses",
            headers={
                "Origin": "http://example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "content-type",
            },
        )
        assert resp.status == 200
        assert resp.headers["Access-Control-Allow-Origin"] == "http://example.com"
        assert resp.headers["Access-Control-Allow-Methods"] == "POST"
        assert resp.headers["Access-Control-Allow-Headers"] == "content-type"
        assert resp.headers["Access-Control-Max-Age"] == str(CORS_MAX_AGE)
    assert ports.expenses.expenses == []


@pytest.mark.asyncio
async def test_cors_headers_on_regular_response():
    ports = _Ports()
    app = create_app(**ports.kwargs())
    async with _serve(app) as client:
        resp = await client.post(
            f"{API_PREFIX}/expenses",
            json={"data": {"amount": 5.0, "operationType": "expense"}},
            headers={"Origin": "http://example.com"},
        )
        assert resp.headers["Access-Control-Allow-Origin"] == "http://example.com"
        assert resp.headers["Access-Control-Allow-Credentials"] == "true"
    assert len(ports.expenses.expenses) == 1