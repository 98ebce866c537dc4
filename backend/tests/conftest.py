"""Shared fakes for the Shopify client and the two sinks."""

import asyncio
import copy

import pytest

from app.core.errors import CustomerLookupError, CustomerWriteError, SinkError
from app.services.capture_service import CaptureService
from app.services.customer_service import CustomerReconciler


def _key(email):
    return email.strip().lower()


class FakeShopify:
    """In-memory stand-in for ShopifyClient that counts every call."""

    def __init__(self, customers=None, fail_lookup=False, fail_write=False):
        self.customers = {_key(c["email"]): dict(c) for c in (customers or [])}
        self.fail_lookup = fail_lookup
        self.fail_write = fail_write
        self.search_calls = []
        self.create_calls = []
        self.update_calls = []
        self._next_id = 1000

    async def search_customer_by_email(self, email):
        self.search_calls.append(email)
        if self.fail_lookup:
            raise CustomerLookupError("Shopify answered 503", upstream_status=503)
        # yield so concurrent captures really interleave
        await asyncio.sleep(0)
        found = self.customers.get(_key(email))
        return copy.deepcopy(found) if found else None

    async def create_customer(self, customer):
        self.create_calls.append(dict(customer))
        if self.fail_write:
            raise CustomerWriteError("Shopify answered 422", upstream_status=422)
        self._next_id += 1
        record = {"id": self._next_id, **customer}
        self.customers[_key(customer["email"])] = record
        return copy.deepcopy(record)

    async def update_customer(self, customer_id, fields):
        self.update_calls.append((customer_id, dict(fields)))
        if self.fail_write:
            raise CustomerWriteError("Shopify answered 422", upstream_status=422)
        for record in self.customers.values():
            if record["id"] == customer_id:
                record.update(fields)
                return copy.deepcopy(record)
        raise AssertionError(f"unknown customer {customer_id}")

    @property
    def total_calls(self):
        return len(self.search_calls) + len(self.create_calls) + len(self.update_calls)


class FakeLogSink:
    def __init__(self, fail=False):
        self.rows = []
        self.fail = fail

    def append_row(self, values):
        if self.fail:
            raise SinkError("Sheet append failed: quota")
        self.rows.append(list(values))


class FakeMailer:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    def send_coupon(self, to_email, code):
        if self.fail:
            raise SinkError(f"Coupon email to {to_email} failed: smtp down")
        self.sent.append((to_email, code))


@pytest.fixture
def shopify():
    return FakeShopify()


@pytest.fixture
def log_sink():
    return FakeLogSink()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def make_service(log_sink, mailer):
    def _make(shopify, **kwargs):
        return CaptureService(
            reconciler=CustomerReconciler(shopify),
            log_sink=kwargs.pop("log_sink", log_sink),
            mailer=kwargs.pop("mailer", mailer),
            **kwargs,
        )

    return _make
