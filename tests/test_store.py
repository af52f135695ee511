import pytest

from app.core.exceptions import DuplicateUserError
from app.db.store import INCOMES, VEHICLES
from conftest import run


def _user(user_id, phone, email):
    return {"id": user_id, "phone": phone, "email": email, "password_hash": "x"}


def test_user_uniqueness(store):
    run(store.insert_user(_user("u1", "+911111111111", "a@example.com")))

    with pytest.raises(DuplicateUserError):
        run(store.insert_user(_user("u2", "+911111111111", "b@example.com")))
    with pytest.raises(DuplicateUserError):
        run(store.insert_user(_user("u3", "+912222222222", "a@example.com")))

    assert run(store.find_user_by_phone("+911111111111"))["id"] == "u1"
    assert run(store.find_user_by_email("a@example.com"))["id"] == "u1"
    assert run(store.find_user_by_id("u2")) is None


def test_pending_signup_replace_and_delete(store):
    run(store.save_pending_signup({"phone": "+911111111111", "otp": "11111"}))
    run(store.save_pending_signup({"phone": "+911111111111", "otp": "22222"}))

    assert run(store.get_pending_signup("+911111111111"))["otp"] == "22222"
    assert run(store.delete_pending_signup("+911111111111")) is True
    assert run(store.delete_pending_signup("+911111111111")) is False
    assert run(store.get_pending_signup("+911111111111")) is None


def test_reads_return_copies(store):
    run(store.insert(VEHICLES, {"id": "v1", "user_id": "u1", "vehicle_no": "KA01"}))
    vehicle = run(store.find_by_id(VEHICLES, "v1"))
    vehicle["vehicle_no"] = "changed"

    assert run(store.find_by_id(VEHICLES, "v1"))["vehicle_no"] == "KA01"


def test_owner_scoping_and_filters(store):
    run(store.insert(INCOMES, {"id": "i1", "user_id": "u1", "vehicle": "A", "payment_status": "paid"}))
    run(store.insert(INCOMES, {"id": "i2", "user_id": "u1", "vehicle": "B", "payment_status": "unpaid"}))
    run(store.insert(INCOMES, {"id": "i3", "user_id": "u2", "vehicle": "A", "payment_status": "paid"}))

    assert {d["id"] for d in run(store.find_by_owner(INCOMES, "u1"))} == {"i1", "i2"}
    assert [d["id"] for d in run(store.find_by_owner(INCOMES, "u1", {"vehicle": "A"}))] == ["i1"]
    assert run(store.find_by_owner(INCOMES, "u1", {"vehicle": "A", "payment_status": "unpaid"})) == []


def test_update_and_delete_are_owner_scoped(store):
    run(store.insert(VEHICLES, {"id": "v1", "user_id": "u1", "model": "old"}))

    assert run(store.update(VEHICLES, "v1", "u2", {"model": "new"})) is None
    assert run(store.update(VEHICLES, "v1", "u1", {"model": "new"}))["model"] == "new"
    assert run(store.delete(VEHICLES, "v1", "u2")) is False
    assert run(store.delete(VEHICLES, "v1", "u1")) is True
    assert run(store.find_by_id(VEHICLES, "v1")) is None


def test_unknown_collection(store):
    with pytest.raises(KeyError):
        run(store.insert("trips", {"id": "t1", "user_id": "u1"}))


def test_ping(store):
    assert run(store.ping()) is True
