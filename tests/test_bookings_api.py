from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from barbermarket import scheduling
from barbermarket.models import Booking
from barbermarket.scheduling import SlotTakenError, create_booking
from barbermarket.schemas import BookingCreate

MONDAY = "2099-01-05"


def book(client, headers, barber_id, time, day=MONDAY, **extra):
    return client.post(
        "/bookings",
        headers=headers,
        json={"barber_id": barber_id, "appointment_date": day, "appointment_time": time, **extra},
    )


def test_create_booking_copies_profile_terms(client, barber, customer, fixed_profile):
    headers, barber_id = barber
    r = book(client, customer, barber_id, "14:00", customer_notes="skin fade")
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["status"] == "pending"
    assert body["duration_minutes"] == 45
    assert Decimal(body["price"]) == Decimal("25")
    assert body["customer_notes"] == "skin fade"

    # later profile edits don't touch the existing booking
    r = client.put(
        "/barbers/me/profile",
        headers=headers,
        json={**fixed_profile, "base_price": "30", "appointment_duration": 60},
    )
    assert r.status_code == 200
    r = client.get(f"/bookings/{body['id']}", headers=customer)
    assert r.json()["duration_minutes"] == 45
    assert Decimal(r.json()["price"]) == Decimal("25")


def test_same_slot_twice_is_a_conflict(client, barber, signup):
    _, barber_id = barber
    first = signup("first@example.com")
    second = signup("second@example.com")

    assert book(client, first, barber_id, "14:00").status_code == 201
    r = book(client, second, barber_id, "14:00")
    assert r.status_code == 409
    assert r.json()["detail"] == "This time slot is no longer available"


def test_overlapping_slot_is_a_conflict(client, barber, customer):
    _, barber_id = barber
    assert book(client, customer, barber_id, "14:00").status_code == 201
    assert book(client, customer, barber_id, "14:30").status_code == 409
    # 14:45 starts exactly when the 14:00 booking ends
    assert book(client, customer, barber_id, "14:45").status_code == 201


def test_only_customers_book(client, barber):
    headers, barber_id = barber
    assert book(client, headers, barber_id, "14:00").status_code == 403


def test_booking_in_the_past(client, barber, customer):
    _, barber_id = barber
    r = book(client, customer, barber_id, "14:00", day="2000-01-03")
    assert r.status_code == 400
    assert r.json()["detail"] == "Appointment must be in the future"


def test_mobile_barber_needs_customer_location(client, signup, customer):
    headers = signup("mobile@example.com", "barber")
    r = client.put(
        "/barbers/me/profile",
        headers=headers,
        json={
            "base_price": "20",
            "appointment_duration": 30,
            "specialties": ["buzz_cuts"],
            "location_type": "mobile",
            "service_radius_miles": 3,
        },
    )
    barber_id = r.json()["id"]

    assert book(client, customer, barber_id, "10:00").status_code == 400
    assert book(client, customer, barber_id, "10:00", customer_location="Dorm 4").status_code == 201


def test_unknown_barber(client, customer):
    assert book(client, customer, 999, "10:00").status_code == 404


def test_invalid_time_format(client, barber, customer):
    _, barber_id = barber
    assert book(client, customer, barber_id, "25:00").status_code == 422


def test_lifecycle_over_http(client, barber, customer):
    headers, barber_id = barber
    booking_id = book(client, customer, barber_id, "14:00").json()["id"]

    r = client.patch(f"/bookings/{booking_id}", headers=customer, json={"status": "confirmed"})
    assert r.status_code == 403

    r = client.patch(f"/bookings/{booking_id}", headers=headers, json={"status": "confirmed"})
    assert r.status_code == 200
    assert r.json()["status"] == "confirmed"
    assert r.json()["confirmed_at"] is not None

    r = client.patch(f"/bookings/{booking_id}", headers=customer, json={"status": "completed"})
    assert r.status_code == 403

    r = client.patch(f"/bookings/{booking_id}", headers=headers, json={"status": "completed"})
    assert r.status_code == 200
    assert r.json()["completed_at"] is not None

    r = client.patch(
        f"/bookings/{booking_id}",
        headers=customer,
        json={"status": "cancelled", "cancelled_by": "customer"},
    )
    assert r.status_code == 409
    assert r.json()["detail"] == "Cannot cancel completed bookings"
    assert client.get(f"/bookings/{booking_id}", headers=customer).json()["status"] == "completed"


def test_cancellation_guards(client, barber, customer):
    headers, barber_id = barber
    booking_id = book(client, customer, barber_id, "14:00").json()["id"]

    r = client.patch(f"/bookings/{booking_id}", headers=customer, json={"status": "cancelled"})
    assert r.status_code == 400

    r = client.patch(
        f"/bookings/{booking_id}",
        headers=customer,
        json={"status": "cancelled", "cancelled_by": "barber"},
    )
    assert r.status_code == 403

    r = client.patch(
        f"/bookings/{booking_id}",
        headers=headers,
        json={"status": "cancelled", "cancelled_by": "barber", "cancellation_reason": "sick"},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "cancelled"
    assert body["cancelled_by"] == "barber"
    assert body["cancellation_reason"] == "sick"


def test_strangers_cannot_see_or_touch_bookings(client, barber, customer, signup):
    _, barber_id = barber
    booking_id = book(client, customer, barber_id, "14:00").json()["id"]
    stranger = signup("stranger@example.com")

    assert client.get(f"/bookings/{booking_id}", headers=stranger).status_code == 403
    r = client.patch(
        f"/bookings/{booking_id}",
        headers=stranger,
        json={"status": "cancelled", "cancelled_by": "customer"},
    )
    assert r.status_code == 403


def test_list_bookings_by_role(client, barber, customer):
    headers, barber_id = barber
    book(client, customer, barber_id, "14:00")
    book(client, customer, barber_id, "15:30")

    mine = client.get("/bookings", headers=customer).json()
    assert [b["appointment_time"] for b in mine] == ["15:30", "14:00"]

    as_barber = client.get("/bookings", headers=headers, params={"role": "barber"}).json()
    assert len(as_barber) == 2
    assert client.get("/bookings", headers=headers, params={"role": "barber", "status": "confirmed"}).json() == []


def test_unique_index_only_covers_active_bookings(session, make_barber, make_customer):
    barber = make_barber(session)
    customer = make_customer(session, "c@example.com")

    def row(status):
        return Booking(
            customer_id=customer.id,
            barber_id=barber.id,
            appointment_date=date(2099, 1, 5),
            appointment_time="14:00",
            duration_minutes=45,
            price=Decimal("20.00"),
            status=status,
        )

    session.add(row("cancelled"))
    session.add(row("pending"))
    session.commit()

    session.add(row("confirmed"))
    with pytest.raises(IntegrityError):
        session.commit()


def test_concurrent_bookings_one_wins(engine, session, make_barber, make_customer, monkeypatch):
    barber = make_barber(session)
    customers = [make_customer(session, "a@example.com"), make_customer(session, "b@example.com")]
    request = BookingCreate(barber_id=barber.id, appointment_date=date(2099, 1, 5), appointment_time="14:00")

    # both requests pass the read-side check before either has written
    monkeypatch.setattr(scheduling, "load_active_bookings", lambda *args: [])

    outcomes = []
    with Session(engine) as first, Session(engine) as second:
        for db, customer in zip((first, second), customers):
            try:
                create_booking(db, customer.id, request)
                outcomes.append("booked")
            except SlotTakenError as e:
                assert e.message == "This time slot is no longer available"
                outcomes.append("taken")

    assert sorted(outcomes) == ["booked", "taken"]


def test_is_bookable(session, make_barber, make_customer):
    barber = make_barber(session)
    customer = make_customer(session, "c@example.com")
    request = BookingCreate(barber_id=barber.id, appointment_date=date(2099, 1, 5), appointment_time="14:00")
    create_booking(session, customer.id, request)

    assert not scheduling.is_bookable(session, barber.id, date(2099, 1, 5), "14:30").available
    assert scheduling.is_bookable(session, barber.id, date(2099, 1, 5), "14:45").available
    assert scheduling.is_bookable(session, barber.id, date(2099, 1, 6), "14:00").available
