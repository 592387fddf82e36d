"""API tests for the booking endpoints (FastAPI TestClient, SQLite session)."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient
from app.database import get_db
from app.main import app
from app.models.booking import BookingStatus


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def as_user(user):
    return {"X-User-Id": str(user.id)}


class TestCreateEndpoint:
    def test_create_returns_201(self, client, make_user, make_vehicle):
        user, car = make_user(), make_vehicle(price_per_day=30.0)

        resp = client.post("/api/bookings", headers=as_user(user),
                           json={"carId": car.id, "startDate": "2030-06-10", "endDate": "2030-06-11"})

        assert resp.status_code == 201
        body = resp.json()
        assert body["booking"]["status"] == "pending"
        assert body["booking"]["total_price"] == 60.0
        assert body["booking"]["vehicle"]["brand"] == car.brand

    def test_capacity_exhausted_is_400(self, client, make_user, make_vehicle, make_booking):
        car = make_vehicle(quantity=1)
        make_booking(make_user(), car, "2030-06-10", "2030-06-12")

        resp = client.post("/api/bookings", headers=as_user(make_user()),
                           json={"carId": car.id, "startDate": "2030-06-11", "endDate": "2030-06-13"})

        assert resp.status_code == 400
        assert "No cars available" in resp.json()["detail"]

    def test_unknown_car_is_404(self, client, make_user):
        resp = client.post("/api/bookings", headers=as_user(make_user()),
                           json={"carId": 999, "startDate": "2030-06-10", "endDate": "2030-06-11"})
        assert resp.status_code == 404

    def test_far_future_interval_is_400(self, client, make_user, make_vehicle):
        car = make_vehicle()
        resp = client.post("/api/bookings", headers=as_user(make_user()),
                           json={"carId": car.id, "startDate": "9999-12-31", "endDate": "9999-12-31"})

        assert resp.status_code == 400
        assert client.get(f"/api/cars/{car.id}/unavailable-days").status_code == 200

    def test_missing_identity_is_401(self, client, make_vehicle):
        resp = client.post("/api/bookings",
                           json={"carId": make_vehicle().id, "startDate": "2030-06-10", "endDate": "2030-06-11"})
        assert resp.status_code == 401


class TestLifecycleEndpoints:
    def test_pay_then_cancel_rejected(self, client, make_user, make_vehicle, make_booking):
        user = make_user()
        booking = make_booking(user, make_vehicle())

        assert client.patch(f"/api/bookings/{booking.id}/pay", headers=as_user(user)).status_code == 200
        assert client.patch(f"/api/bookings/{booking.id}/pay", headers=as_user(user)).status_code == 400
        resp = client.patch(f"/api/bookings/{booking.id}/cancel", headers=as_user(user))
        assert resp.status_code == 400

    def test_cancel_other_users_booking_is_403(self, client, make_user, make_vehicle, make_booking):
        booking = make_booking(make_user(), make_vehicle())
        resp = client.patch(f"/api/bookings/{booking.id}/cancel", headers=as_user(make_user()))
        assert resp.status_code == 403

    def test_malformed_id_is_400(self, client, make_user):
        resp = client.patch("/api/bookings/not-an-id/pay", headers=as_user(make_user()))
        assert resp.status_code == 400

    def test_update_time_rejects_reversed_dates(self, client, make_user, make_vehicle, make_booking):
        user = make_user()
        booking = make_booking(user, make_vehicle())
        resp = client.patch(f"/api/bookings/{booking.id}/time", headers=as_user(user),
                            json={"startTime": "2030-06-12", "endTime": "2030-06-10"})
        assert resp.status_code == 400

    def test_delete_finished_booking(self, client, make_user, make_vehicle, make_booking):
        user = make_user()
        booking = make_booking(user, make_vehicle(), status=BookingStatus.COMPLETED)
        resp = client.delete(f"/api/bookings/{booking.id}", headers=as_user(user))
        assert resp.status_code == 200

    def test_list_my_bookings_404_when_empty(self, client, make_user):
        assert client.get("/api/bookings", headers=as_user(make_user())).status_code == 404


class TestAdminEndpoints:
    def test_attribute_update_requires_admin(self, client, make_user, make_vehicle, make_booking):
        user = make_user()
        booking = make_booking(user, make_vehicle())
        resp = client.patch(f"/api/bookings/{booking.id}", headers=as_user(user),
                            json={"field": "totalPrice", "value": 1})
        assert resp.status_code == 403

    def test_attribute_update_rejects_field(self, client, make_user, make_vehicle, make_booking):
        booking = make_booking(make_user(), make_vehicle())
        resp = client.patch(f"/api/bookings/{booking.id}", headers=as_user(make_user(is_admin=True)),
                            json={"field": "userId", "value": 1})
        assert resp.status_code == 400

    def test_bulk_delete_not_routed_as_single_delete(self, client, make_user, make_vehicle, make_booking):
        user, car = make_user(), make_vehicle(quantity=3)
        make_booking(user, car, status=BookingStatus.CANCELLED)
        make_booking(user, car, status=BookingStatus.COMPLETED)
        make_booking(user, car)

        resp = client.delete("/api/bookings/terminal", headers=as_user(make_user(is_admin=True)))

        assert resp.status_code == 200
        assert resp.json()["deletedCount"] == 2

    def test_summary_with_no_bookings(self, client, make_user):
        resp = client.get("/api/bookings/summary", headers=as_user(make_user(is_admin=True)))
        assert resp.status_code == 200
        assert resp.json()["mostPopularCar"] == {"name": "No data", "bookings": 0}

    def test_admin_list_includes_user(self, client, make_user, make_vehicle, make_booking):
        make_booking(make_user(name="Sam"), make_vehicle())
        resp = client.get("/api/admin/bookings", headers=as_user(make_user(is_admin=True)))
        assert resp.status_code == 200
        assert resp.json()[0]["user"]["name"] == "Sam"


class TestCalendarEndpoints:
    def test_unavailable_days(self, client, make_user, make_vehicle, make_booking):
        car = make_vehicle(quantity=1)
        make_booking(make_user(), car, "2030-06-10", "2030-06-11")

        resp = client.get(f"/api/cars/{car.id}/unavailable-days")

        assert resp.json() == {"fullyBookedDays": ["2030-06-10", "2030-06-11"]}

    def test_editable_days_malformed_id(self, client, make_user):
        resp = client.get("/api/bookings/abc/editable-days", headers=as_user(make_user()))
        assert resp.status_code == 400

    def test_editable_days(self, client, make_user, make_vehicle, make_booking):
        user, car = make_user(), make_vehicle(quantity=1)
        booking = make_booking(user, car, "2030-06-10", "2030-06-10")

        resp = client.get(f"/api/bookings/{booking.id}/editable-days", headers=as_user(user))

        assert resp.json() == {"fullyBookedDays": [], "userDays": ["2030-06-10"]}


class TestMalformedIdentifiers:
    @pytest.mark.parametrize("raw", ["²", "99999999999999999999999", "0"])
    def test_path_id_outside_integer_range_is_400(self, client, make_user, raw):
        user = make_user()
        assert client.get(f"/api/bookings/{raw}/editable-days", headers=as_user(user)).status_code == 400
        assert client.patch(f"/api/bookings/{raw}/pay", headers=as_user(user)).status_code == 400

    @pytest.mark.parametrize("raw", ["99999999999999999999999", "-1", "1.0"])
    def test_user_header_outside_integer_range_is_401(self, client, raw):
        resp = client.get("/api/bookings", headers={"X-User-Id": raw})
        assert resp.status_code == 401

    def test_oversized_car_id_in_body_is_rejected(self, client, make_user):
        resp = client.post("/api/bookings", headers=as_user(make_user()),
                           json={"carId": 99999999999999999999999, "startDate": "2030-06-10", "endDate": "2030-06-11"})
        assert resp.status_code == 422
