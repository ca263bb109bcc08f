"""API tests for public bookings, payments and boarding."""

from uuid import uuid4

import pytest


def booking_body(tour, seats, email="maria@example.com"):
    return {
        "tour_id": str(tour.id),
        "contractor": {
            "first_name": "Maria",
            "last_name": "Lopez",
            "email": email,
            "phone": "6141234567",
            "age": 40,
        },
        "companions": [{"name": "Jorge Lopez", "age": 42}],
        "selected_seats": seats,
    }


@pytest.mark.asyncio
async def test_quote(test_client, tour):
    response = await test_client.post("/v1/booking/tour/quote", json={
        "tour_id": str(tour.id),
        "contractor_age": 40,
        "companions": [{"name": "Sofia", "age": 8}],
    })

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == {"amount": 250000, "currency": "MXN"}
    assert data["rooms_summary"] == "1 Double"


@pytest.mark.asyncio
async def test_tour_booking_is_idempotent(test_client, tour):
    headers = {"Idempotency-Key": "booking-1"}
    body = booking_body(tour, [4, 5])

    first = await test_client.post("/v1/booking/tour/create", json=body, headers=headers)
    replay = await test_client.post("/v1/booking/tour/create", json=body, headers=headers)

    assert first.status_code == 200
    assert replay.status_code == 200
    assert replay.json()["contract_number"] == first.json()["contract_number"]
    assert first.json()["seats"] == [4, 5]

    seat_map = await test_client.post("/v1/tour/seat-map", json={"tour_id": str(tour.id)})
    assert seat_map.json()["available_seats"] == 10


@pytest.mark.asyncio
async def test_idempotency_key_reused_with_another_body(test_client, tour):
    headers = {"Idempotency-Key": "booking-2"}
    await test_client.post("/v1/booking/tour/create", json=booking_body(tour, [4, 5]), headers=headers)

    response = await test_client.post(
        "/v1/booking/tour/create", json=booking_body(tour, [6, 7]), headers=headers
    )

    assert response.status_code == 422
    assert response.json()["code"] == "IDEMPOTENCY_KEY_MISMATCH"


@pytest.mark.asyncio
async def test_booking_requires_idempotency_key(test_client, tour):
    response = await test_client.post("/v1/booking/tour/create", json=booking_body(tour, [4, 5]))

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_seat_conflict_is_replayed(test_client, tour, tour_booking):
    headers = {"Idempotency-Key": "booking-3"}
    body = booking_body(tour, [3, 4], email="other@example.com")

    first = await test_client.post("/v1/booking/tour/create", json=body, headers=headers)
    replay = await test_client.post("/v1/booking/tour/create", json=body, headers=headers)

    assert first.status_code == 409
    assert first.headers["content-type"].startswith("application/problem+json")
    assert first.json()["code"] == "SEAT_UNAVAILABLE"
    assert first.json()["seats"] == [3]
    assert replay.status_code == 409
    assert replay.json()["seats"] == [3]


@pytest.mark.asyncio
async def test_seat_count_mismatch(test_client, tour):
    response = await test_client.post(
        "/v1/booking/tour/create",
        json=booking_body(tour, [4]),
        headers={"Idempotency-Key": "booking-4"},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "SEAT_COUNT_MISMATCH"


@pytest.mark.asyncio
async def test_payment_confirmation_replays(test_client, tour_booking):
    headers = {"Idempotency-Key": "pay-1"}
    body = {"contract_number": tour_booking.contract_number, "payment_method": "mercadopago"}

    first = await test_client.post("/v1/payment/confirm", json=body, headers=headers)
    replay = await test_client.post("/v1/payment/confirm", json=body, headers=headers)

    assert first.status_code == 200
    assert first.json()["credited"]["amount"] == 60000
    assert replay.json() == first.json()

    reservation = await test_client.post(
        "/v1/booking/get", json={"contract_number": tour_booking.contract_number}
    )
    assert reservation.status_code == 200
    assert reservation.json()["total_paid"] == 60000


@pytest.mark.asyncio
async def test_unknown_contract(test_client):
    response = await test_client.post("/v1/booking/get", json={"contract_number": "00000000"})

    assert response.status_code == 404
    assert response.headers["content-type"].startswith("application/problem+json")


@pytest.mark.asyncio
async def test_bus_trip_from_search_to_boarding(test_client, network, travel_date, admin_headers):
    search = await test_client.post("/v1/bus-network/search", json={
        "origin_id": str(network.stop("Chihuahua")),
        "destination_id": str(network.stop("Cuauhtemoc")),
        "travel_date": travel_date.isoformat(),
    })
    assert search.status_code == 200
    trip = search.json()["items"][0]
    assert trip["adult_price"] == 30000

    purchase = await test_client.post(
        "/v1/booking/bus/create",
        json={
            "schedule_id": trip["schedule_id"],
            "origin_id": str(network.stop("Chihuahua")),
            "destination_id": str(network.stop("Cuauhtemoc")),
            "travel_date": travel_date.isoformat(),
            "passengers": [{
                "first_name": "Ana", "last_name": "Ruiz", "age": 35,
                "email": "ana@example.com", "phone": "6145550101", "seat_number": 9,
            }],
        },
        headers={"Idempotency-Key": "bus-1"},
    )
    assert purchase.status_code == 200
    ticket = purchase.json()["tickets"][0]
    assert purchase.json()["total"]["amount"] == 30000

    scanned = await test_client.post(
        "/v1/ticket/validate", json={"ticket_code": ticket["ticket_code"]}, headers=admin_headers
    )
    assert scanned.status_code == 200
    assert scanned.json()["destination_name"] == "Cuauhtemoc"

    boarded = await test_client.post(
        "/v1/ticket/boarding",
        json={"passenger_id": ticket["passenger_id"], "boarding_status": "boarded"},
        headers=admin_headers,
    )
    assert boarded.json()["boarding_status"] == "boarded"


@pytest.mark.asyncio
async def test_schedule_seat_map_not_found(test_client):
    response = await test_client.post(
        "/v1/bus-network/schedule/seat-map", json={"schedule_id": str(uuid4())}
    )

    assert response.status_code == 404
    assert response.json()["title"] == "Resource Not Found"


@pytest.mark.asyncio
async def test_public_payment_history(test_client, tour_booking):
    await test_client.post(
        "/v1/payment/confirm",
        json={"contract_number": tour_booking.contract_number, "payment_method": "stripe"},
        headers={"Idempotency-Key": "pay-2"},
    )

    response = await test_client.post(
        "/v1/booking/payments", json={"contract_number": tour_booking.contract_number.lower()}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["client_id"] == str(tour_booking.client_id)
    assert [p["amount"] for p in data["items"]] == [60000]

    missing = await test_client.post("/v1/booking/payments", json={"contract_number": "00000000"})
    assert missing.status_code == 404
