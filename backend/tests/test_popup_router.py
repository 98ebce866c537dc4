"""Endpoint tests for POST /popup-capture."""

from datetime import datetime
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import get_capture_service
from app.services.capture_service import CaptureService
from app.services.customer_service import CustomerReconciler
from app.utils.coupon_email import CouponMailer
from main import app

from conftest import FakeLogSink, FakeMailer, FakeShopify


@pytest.fixture
def wire(log_sink, mailer):
    """Install a CaptureService backed by fakes and hand back the Shopify fake."""

    def _wire(shopify):
        service = CaptureService(
            reconciler=CustomerReconciler(shopify),
            log_sink=log_sink,
            mailer=mailer,
        )
        app.dependency_overrides[get_capture_service] = lambda: service
        return shopify

    yield _wire
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)


def test_new_customer_end_to_end(wire, client, log_sink, mailer):
    shopify = wire(FakeShopify())

    resp = client.post("/popup-capture", json={"email": "a@b.com", "phone": "9876543210", "discount": "5"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["shopifyCustomer"]["phone"] == "+919876543210"
    assert body["details"]["couponCode"] == "ISHQME10"

    assert len(shopify.create_calls) == 1
    assert shopify.create_calls[0]["phone"] == "+919876543210"
    assert shopify.update_calls == []

    assert len(log_sink.rows) == 1
    assert log_sink.rows[0][:3] == ["a@b.com", "+919876543210", "5"]
    datetime.fromisoformat(log_sink.rows[0][3])

    assert mailer.sent == [("a@b.com", "ISHQME10")]


def test_numeric_discount_and_phone_are_accepted(wire, client, log_sink):
    shopify = wire(FakeShopify())

    resp = client.post("/popup-capture", json={"email": "a@b.com", "phone": 9876543210, "discount": 5})

    assert resp.status_code == 200
    assert shopify.create_calls[0]["tags"] == "5"
    assert log_sink.rows[0][:3] == ["a@b.com", "+919876543210", "5"]


def test_existing_customer_phone_update(wire, client, mailer):
    shopify = wire(FakeShopify(customers=[{"id": 3, "email": "a@b.com"}]))

    resp = client.post("/popup-capture", json={"email": "a@b.com", "phone": "09876543210", "discount": "10"})

    assert resp.status_code == 200
    assert resp.json()["message"] == "Existing customer updated with phone. Coupon sent."
    assert shopify.update_calls == [(3, {"phone": "+919876543210", "tags": "10"})]
    assert mailer.sent == [("a@b.com", "ISHQME10")]


@pytest.mark.parametrize("payload", [{}, {"email": ""}, {"email": "   ", "phone": "9876543210"}])
def test_missing_email_is_400_without_outbound_calls(wire, client, log_sink, mailer, payload):
    shopify = wire(FakeShopify())

    resp = client.post("/popup-capture", json=payload)

    assert resp.status_code == 400
    assert resp.json() == {
        "success": False,
        "message": "Email is required.",
        "details": {"reason": "validation_error"},
    }
    assert shopify.total_calls == 0
    assert log_sink.rows == []
    assert mailer.sent == []


def test_malformed_body_is_400(wire, client):
    shopify = wire(FakeShopify())

    resp = client.post("/popup-capture", content=b"not json", headers={"Content-Type": "application/json"})

    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert resp.json()["details"]["reason"] == "validation_error"
    assert shopify.total_calls == 0


def test_lookup_failure_is_500_and_skips_sinks(wire, client, log_sink, mailer):
    wire(FakeShopify(fail_lookup=True))

    resp = client.post("/popup-capture", json={"email": "a@b.com", "phone": "9876543210"})

    assert resp.status_code == 500
    assert resp.json()["success"] is False
    assert resp.json()["details"] == {"reason": "lookup_failed"}
    assert log_sink.rows == []
    assert mailer.sent == []


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


@pytest.fixture
def install():
    """Install an arbitrary CaptureService for one test."""

    def _install(service):
        app.dependency_overrides[get_capture_service] = lambda: service
        return service

    yield _install
    app.dependency_overrides.clear()


def test_create_failure_is_500_write_failed(wire, client, log_sink, mailer):
    shopify = wire(FakeShopify(fail_write=True))

    resp = client.post("/popup-capture", json={"email": "a@b.com", "phone": "9876543210"})

    assert resp.status_code == 500
    assert resp.json()["success"] is False
    assert resp.json()["details"] == {"reason": "write_failed"}
    assert len(shopify.create_calls) == 1
    assert log_sink.rows == []
    assert mailer.sent == []


def test_update_failure_is_500_write_failed(wire, client, log_sink, mailer):
    shopify = wire(FakeShopify(customers=[{"id": 3, "email": "a@b.com"}], fail_write=True))

    resp = client.post("/popup-capture", json={"email": "a@b.com", "phone": "9876543210"})

    assert resp.status_code == 500
    assert resp.json()["details"] == {"reason": "write_failed"}
    assert len(shopify.update_calls) == 1
    assert shopify.create_calls == []
    assert log_sink.rows == []
    assert mailer.sent == []


def test_unconfigured_platform_is_500(install, client):
    install(CaptureService(reconciler=None, log_sink=FakeLogSink(), mailer=FakeMailer()))

    resp = client.post("/popup-capture", json={"email": "a@b.com"})

    assert resp.status_code == 500
    assert resp.json()["success"] is False
    assert resp.json()["details"] == {"reason": "platform_unconfigured"}


def test_failing_sinks_still_return_200(install, client):
    shopify = FakeShopify()
    install(
        CaptureService(
            reconciler=CustomerReconciler(shopify),
            log_sink=FakeLogSink(fail=True),
            mailer=FakeMailer(fail=True),
        )
    )

    resp = client.post("/popup-capture", json={"email": "a@b.com", "phone": "9876543210", "discount": "5"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["details"]["logged"] is False
    assert body["details"]["notified"] is False
    assert len(shopify.create_calls) == 1


@patch("app.utils.coupon_email.smtplib.SMTP_SSL")
def test_unsendable_address_does_not_fail_the_capture(mock_ssl, install, client, log_sink):
    shopify = FakeShopify()
    install(
        CaptureService(
            reconciler=CustomerReconciler(shopify),
            log_sink=log_sink,
            mailer=CouponMailer("contact@ishqme.com", "pw"),
        )
    )

    resp = client.post(
        "/popup-capture",
        json={"email": "a@b.com\nBcc: x@evil.com", "phone": "9876543210"},
    )

    assert resp.status_code == 200
    assert resp.json()["details"]["notified"] is False
    assert len(shopify.create_calls) == 1
    assert len(log_sink.rows) == 1
    mock_ssl.assert_not_called()
