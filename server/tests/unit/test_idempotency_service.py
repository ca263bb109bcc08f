"""Unit tests for idempotency records."""

from datetime import timedelta

import pytest

from agency_api.models.common import utcnow
from agency_api.models.idempotency import IdempotencyRecord
from agency_api.services.idempotency_service import IdempotencyMismatchError, IdempotencyService

BODY = {"contract_number": "AB12CD34", "payment_method": "stripe"}


def test_request_hash_ignores_key_order():
    assert IdempotencyService.compute_request_hash({"a": 1, "b": 2}) == \
        IdempotencyService.compute_request_hash({"b": 2, "a": 1})


@pytest.mark.asyncio
async def test_stored_response_is_replayed(test_session):
    service = IdempotencyService(test_session)
    assert await service.check_idempotency("key-1", "payment/confirm", BODY) is None

    await service.store_response("key-1", "payment/confirm", BODY, 409, {"code": "SEAT_UNAVAILABLE"})

    assert await service.check_idempotency("key-1", "payment/confirm", BODY) == (409, {"code": "SEAT_UNAVAILABLE"})
    # Keys are scoped per operation
    assert await service.check_idempotency("key-1", "booking/tour", BODY) is None


@pytest.mark.asyncio
async def test_reused_key_with_other_body(test_session):
    service = IdempotencyService(test_session)
    await service.store_response("key-2", "payment/confirm", BODY, 200, {"ok": True})

    with pytest.raises(IdempotencyMismatchError):
        await service.check_idempotency("key-2", "payment/confirm", {**BODY, "payment_method": "manual"})


@pytest.mark.asyncio
async def test_duplicate_store_is_ignored(test_session):
    service = IdempotencyService(test_session)
    await service.store_response("key-3", "booking/bus", BODY, 200, {"first": True})
    await service.store_response("key-3", "booking/bus", BODY, 200, {"first": False})

    assert await service.check_idempotency("key-3", "booking/bus", BODY) == (200, {"first": True})


@pytest.mark.asyncio
async def test_cleanup_removes_expired_records(test_session):
    service = IdempotencyService(test_session)
    test_session.add(IdempotencyRecord(
        idempotency_key="old",
        operation="booking/tour",
        request_body_hash=service.compute_request_hash(BODY),
        response_status_code=200,
        response_body="{}",
        expires_at=utcnow() - timedelta(minutes=1),
    ))
    await test_session.commit()
    await service.store_response("fresh", "booking/tour", BODY, 200, {})

    assert await service.cleanup_expired_records() == 1
    assert await service.check_idempotency("old", "booking/tour", BODY) is None
    assert await service.check_idempotency("fresh", "booking/tour", BODY) == (200, {})
