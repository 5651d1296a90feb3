from datetime import datetime, timedelta

import pytest
from conftest import make_token

from salonapp.models import User
from salonapp.subscription import check_subscription, get_subscription_status

NOW = datetime(2030, 5, 6, 12, 0)


def operator(**fields):
    fields.setdefault("email", "someone@salon.test")
    fields.setdefault("is_admin", False)
    return User(**fields)


@pytest.mark.parametrize(
    "fields, allowed",
    [
        ({"subscription_status": "active"}, True),
        ({"subscription_status": "trial", "trial_ends_at": NOW + timedelta(days=1)}, True),
        ({"subscription_status": "trial", "trial_ends_at": NOW - timedelta(seconds=1)}, False),
        ({"subscription_status": "cancelled"}, False),
        ({"subscription_status": "past_due"}, False),
        ({"subscription_status": "cancelled", "is_admin": True}, True),
        ({"subscription_status": "past_due", "email": "Admin@salon.test"}, True),
    ],
)
def test_subscription_gate(fields, allowed):
    ok, reason = check_subscription(operator(**fields), NOW)
    assert ok is allowed
    assert (reason is None) is allowed


def test_status_reports_trial_days_left():
    status = get_subscription_status(
        operator(subscription_status="trial", trial_ends_at=NOW + timedelta(days=3, hours=1)), NOW
    )
    assert status["trial_days_left"] == 3
    assert status["allowed"] is True


def test_expired_trial_gets_402(api, db, owner):
    owner.trial_ends_at = datetime.utcnow() - timedelta(days=1)
    db.commit()

    response = api.get("/clients")

    assert response.status_code == 402
    # the status endpoints stay reachable so the payment screen can render
    assert api.get("/billing/status").json()["allowed"] is False
    assert api.get("/auth/me").status_code == 200


def test_cancelled_subscription_gets_402(api, db, owner):
    owner.subscription_status = "cancelled"
    db.commit()
    assert api.get("/appointments").status_code == 402


def test_new_operator_starts_trial(anonymous, db):
    token = make_token("new-uid", "nova@salon.test", name="Nova")

    response = anonymous.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "nova@salon.test"
    assert body["subscription_status"] == "trial"
    user = db.query(User).filter(User.auth_uid == "new-uid").one()
    assert user.trial_ends_at > datetime.utcnow() + timedelta(days=6)


def test_missing_or_bad_token_is_401(anonymous):
    assert anonymous.get("/clients").status_code == 401
    assert anonymous.get("/clients", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401


def test_expired_token_is_401(anonymous, owner):
    token = make_token(owner.auth_uid, owner.email, expires_in=timedelta(minutes=-5))
    response = anonymous.get("/clients", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.headers.get("X-Token-Expired") == "true"


def test_admin_endpoints_need_admin(api):
    assert api.get("/admin/profiles").status_code == 403


def test_admin_activates_and_blocks(anonymous, db, owner):
    admin = User(auth_uid="admin-uid", email="admin@salon.test", subscription_status="trial")
    db.add(admin)
    db.commit()
    headers = {"Authorization": f"Bearer {make_token('admin-uid', 'admin@salon.test')}"}

    profiles = anonymous.get("/admin/profiles", params={"search": "owner"}, headers=headers).json()
    assert [p["email"] for p in profiles] == ["owner@salon.test"]

    activated = anonymous.post(f"/admin/profiles/{owner.id}/activate", headers=headers).json()
    assert activated["subscription_status"] == "active"
    assert activated["last_payment_date"] is not None

    refused = anonymous.post(f"/admin/profiles/{owner.id}/block", json={}, headers=headers)
    assert refused.status_code == 400

    blocked = anonymous.post(f"/admin/profiles/{owner.id}/block", json={"confirm": True}, headers=headers)
    assert blocked.json()["subscription_status"] == "cancelled"
