"""Unit tests for payment confirmation and manual payments."""

from datetime import date

import pytest

from agency_api.core.exceptions import NotFoundError, PaymentRejectedError, ValidationError
from agency_api.schemas.booking import Companion, PaymentMethod
from agency_api.schemas.client import SaveClientRequest
from agency_api.schemas.payment import ConfirmPaymentRequest, RecordPaymentRequest
from agency_api.services.client_service import ClientService
from agency_api.services.payment_service import PaymentService


def confirm(contract_number: str, method: PaymentMethod = PaymentMethod.STRIPE) -> ConfirmPaymentRequest:
    return ConfirmPaymentRequest(contract_number=contract_number, payment_method=method)


@pytest.mark.asyncio
async def test_first_confirmation_credits_the_advance(test_session, tour_booking):
    result = await PaymentService(test_session).confirm_payment(confirm(tour_booking.contract_number))

    assert result.credited.amount == 60000
    assert result.total_paid == 60000
    assert result.remaining_balance == 190000
    assert result.status == "pending"
    assert result.payment.payment_method == "stripe"


@pytest.mark.asyncio
async def test_second_confirmation_settles_the_contract(test_session, tour_booking):
    service = PaymentService(test_session)
    await service.confirm_payment(confirm(tour_booking.contract_number))

    result = await service.confirm_payment(confirm(tour_booking.contract_number, PaymentMethod.MERCADOPAGO))

    assert result.credited.amount == 190000
    assert result.remaining_balance == 0
    assert result.status == "confirmed"

    settled = await service.confirm_payment(confirm(tour_booking.contract_number))
    assert settled.credited.amount == 0
    assert settled.payment is None
    assert settled.total_paid == 250000


@pytest.mark.asyncio
async def test_contract_lookup_ignores_case_and_spaces(test_session, tour_booking):
    client = await PaymentService(test_session).get_client_by_contract(
        f"  {tour_booking.contract_number.lower()} "
    )

    assert client.id == tour_booking.client_id


@pytest.mark.asyncio
async def test_unknown_contract(test_session):
    with pytest.raises(NotFoundError):
        await PaymentService(test_session).confirm_payment(confirm("DEADBEEF"))


@pytest.mark.asyncio
async def test_no_advance_means_nothing_to_credit(test_session, tour):
    client = await ClientService(test_session).save_client(SaveClientRequest(
        tour_id=tour.id,
        first_name="Pedro",
        last_name="Gomez",
        contractor_age=30,
        companions=[Companion(name="Laura Gomez", age=29)],
        advance_payment=0,
    ))

    result = await PaymentService(test_session).confirm_payment(confirm(client.contract_number))

    assert result.credited.amount == 0
    assert result.payment is None
    assert result.total_paid == 0
    assert result.status == "pending"


@pytest.mark.asyncio
async def test_bus_tickets_settle_on_first_confirmation(test_session, bus_tickets):
    result = await PaymentService(test_session).confirm_payment(confirm(bus_tickets.contract_number))

    assert result.credited.amount == 75000
    assert result.status == "confirmed"


@pytest.mark.asyncio
async def test_cancelled_contract_takes_no_payment(test_session, tour_booking):
    await ClientService(test_session).cancel_client(tour_booking.client_id)

    with pytest.raises(ValidationError):
        await PaymentService(test_session).confirm_payment(confirm(tour_booking.contract_number))


class TestManualPayments:
    @pytest.mark.asyncio
    async def test_record_and_list(self, test_session, tour_booking):
        service = PaymentService(test_session)

        await service.record_payment(RecordPaymentRequest(
            client_id=tour_booking.client_id,
            amount=100000,
            payment_date=date(2026, 10, 1),
            notes="Cash at the office",
        ))
        result = await service.record_payment(RecordPaymentRequest(
            client_id=tour_booking.client_id,
            amount=150000,
            payment_method=PaymentMethod.TRANSFER,
            payment_date=date(2026, 10, 5),
        ))

        assert result.status == "confirmed"
        assert result.remaining_balance == 0

        payments = await service.list_payments(tour_booking.client_id)
        assert [p.amount for p in payments] == [100000, 150000]
        assert payments[0].notes == "Cash at the office"

    @pytest.mark.asyncio
    async def test_payment_over_balance_is_rejected(self, test_session, tour_booking):
        service = PaymentService(test_session)

        with pytest.raises(PaymentRejectedError) as exc_info:
            await service.record_payment(RecordPaymentRequest(
                client_id=tour_booking.client_id,
                amount=250001,
            ))
        assert exc_info.value.problem_details["remaining"] == 250000
