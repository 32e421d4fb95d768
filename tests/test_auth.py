from datetime import datetime, timedelta

from turfbook.models.otp import OTP
from turfbook.models.user import User
from tests.utils import API, PASSWORD, register, login, auth_headers


def latest_otp(db_session, value):
    db_session.expire_all()
    return db_session.query(OTP).filter(OTP.value == value).order_by(OTP.id.desc()).first()


class TestRegistration:

    def test_register_with_type_and_value(self, client):
        response = register(client)
        assert response.status_code == 201

        data = response.json()
        assert data["success"] is True
        assert data["token"]
        assert data["user"]["name"] == "alice"
        assert data["user"]["email"] == "alice@example.com"
        assert data["user"]["phone"] is None
        assert data["user"]["role"] == "user"
        assert "password" not in data["user"]
        assert "password_hash" not in data["user"]

    def test_register_with_legacy_phone_field(self, client):
        response = client.post(f"{API}/register", json={
            "name": "carol",
            "password": PASSWORD,
            "confirmPassword": PASSWORD,
            "phone": "+15550199",
        })
        assert response.status_code == 201

        data = response.json()
        assert data["success"] is True
        assert "token" not in data
        assert login(client, value="+15550199").status_code == 200

    def test_register_password_mismatch_creates_nothing(self, client, db_session):
        response = client.post(f"{API}/register", json={
            "name": "alice",
            "password": PASSWORD,
            "confirmPassword": "different",
            "type": "email",
            "value": "alice@example.com",
        })
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Passwords do not match"}
        assert db_session.query(User).count() == 0

    def test_register_missing_fields(self, client):
        response = client.post(f"{API}/register", json={"type": "email", "value": "a@x.com"})
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_register_requires_an_identifier(self, client):
        response = client.post(f"{API}/register", json={
            "name": "alice", "password": PASSWORD, "confirmPassword": PASSWORD,
        })
        assert response.status_code == 400

    def test_register_rejects_both_legacy_identifiers(self, client):
        response = client.post(f"{API}/register", json={
            "name": "alice",
            "password": PASSWORD,
            "confirmPassword": PASSWORD,
            "email": "alice@example.com",
            "phone": "+15550100",
        })
        assert response.status_code == 400
        assert "not both" in response.json()["message"]

    def test_register_rejects_unknown_type(self, client):
        response = register(client, type="fax", value="12345")
        assert response.status_code == 400

    def test_register_duplicate_name(self, client):
        register(client)
        response = register(client, value="other@example.com")
        assert response.status_code == 400
        assert response.json()["message"] == "Username is already taken"

    def test_register_duplicate_email(self, client, db_session):
        register(client)
        response = register(client, name="alice2")
        assert response.status_code == 400
        assert response.json()["message"] == "Email is already registered"
        assert db_session.query(User).filter(User.email == "alice@example.com").count() == 1

    def test_register_duplicate_phone(self, client):
        register(client, name="bob", type="phone", value="+15550100")
        response = register(client, name="bob2", type="phone", value="+15550100")
        assert response.status_code == 400
        assert response.json()["message"] == "Phone number is already registered"

    def test_many_users_without_email(self, client, db_session):
        assert register(client, name="p1", type="phone", value="+15550001").status_code == 201
        assert register(client, name="p2", type="phone", value="+15550002").status_code == 201
        assert db_session.query(User).filter(User.email.is_(None)).count() == 2


class TestLogin:

    def test_login_success(self, client):
        register(client, name="alice", value="a@x.com", password="p1")

        response = login(client, value="a@x.com", password="p1")
        assert response.status_code == 200

        data = response.json()
        assert data["success"] is True
        assert data["token"]
        assert set(data["user"]) == {"id", "name", "email", "phone", "role"}

    def test_login_with_legacy_email_field(self, client):
        register(client)
        response = client.post(f"{API}/login", json={
            "email": "alice@example.com", "password": PASSWORD,
        })
        assert response.status_code == 200

    def test_login_wrong_password(self, client):
        register(client, name="alice", value="a@x.com", password="p1")

        response = login(client, value="a@x.com", password="wrong")
        assert response.status_code == 401

        data = response.json()
        assert data["success"] is False
        assert "token" not in data

    def test_login_unknown_user(self, client):
        response = login(client, value="nobody@example.com")
        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_login_missing_password(self, client):
        response = client.post(f"{API}/login", json={"value": "alice@example.com"})
        assert response.status_code == 400

    def test_login_deactivated_user(self, client, user_token):
        client.patch(f"{API}/deactivate-account", headers=auth_headers(user_token))

        response = login(client)
        assert response.status_code == 404


class TestPasswordReset:

    def test_forgot_password_issues_otp(self, client, db_session):
        register(client)

        response = client.post(f"{API}/initiate-forgot-password", json={
            "type": "email", "value": "alice@example.com",
        })
        assert response.status_code == 200
        assert response.json()["success"] is True

        record = latest_otp(db_session, "alice@example.com")
        assert record is not None
        assert len(record.otp) == 6 and record.otp.isdigit()
        assert record.used is False
        assert timedelta(minutes=4) < record.expires_at - datetime.utcnow() <= timedelta(minutes=5)

    def test_forgot_password_unknown_account(self, client):
        response = client.post(f"{API}/initiate-forgot-password", json={
            "type": "email", "value": "nobody@example.com",
        })
        assert response.status_code == 404

    def test_forgot_password_type_must_match_field(self, client):
        register(client)
        response = client.post(f"{API}/initiate-forgot-password", json={
            "type": "phone", "value": "alice@example.com",
        })
        assert response.status_code == 404

    def test_reset_password_with_otp(self, client, db_session):
        register(client)
        client.post(f"{API}/initiate-forgot-password", json={
            "type": "email", "value": "alice@example.com",
        })
        code = latest_otp(db_session, "alice@example.com").otp

        response = client.post(f"{API}/verify-otp-generate-password", json={
            "value": "alice@example.com", "otp": code, "newPassword": "NewPassword123",
        })
        assert response.status_code == 200
        assert response.json()["success"] is True

        assert login(client).status_code == 401
        assert login(client, password="NewPassword123").status_code == 200
        assert latest_otp(db_session, "alice@example.com").used is True

    def test_used_otp_cannot_reset_twice(self, client, db_session):
        register(client)
        client.post(f"{API}/initiate-forgot-password", json={
            "type": "email", "value": "alice@example.com",
        })
        code = latest_otp(db_session, "alice@example.com").otp
        body = {"value": "alice@example.com", "otp": code, "newPassword": "NewPassword123"}

        first = client.post(f"{API}/verify-otp-generate-password", json=body)
        assert first.status_code == 200

        body["newPassword"] = "Another123"
        second = client.post(f"{API}/verify-otp-generate-password", json=body)
        assert second.status_code == 401
        assert second.json()["success"] is False
        assert login(client, password="NewPassword123").status_code == 200

    def test_expired_otp_is_rejected(self, client, db_session):
        register(client)
        client.post(f"{API}/initiate-forgot-password", json={
            "type": "email", "value": "alice@example.com",
        })
        record = latest_otp(db_session, "alice@example.com")
        record.expires_at = datetime.utcnow() - timedelta(seconds=1)
        db_session.commit()

        response = client.post(f"{API}/verify-otp-generate-password", json={
            "value": "alice@example.com", "otp": record.otp, "newPassword": "NewPassword123",
        })
        assert response.status_code == 401

    def test_wrong_otp_is_rejected(self, client):
        register(client)
        client.post(f"{API}/initiate-forgot-password", json={
            "type": "email", "value": "alice@example.com",
        })

        response = client.post(f"{API}/verify-otp-generate-password", json={
            "value": "alice@example.com", "otp": "not-a-code", "newPassword": "NewPassword123",
        })
        assert response.status_code == 401

    def test_reset_requires_all_fields(self, client):
        response = client.post(f"{API}/verify-otp-generate-password", json={
            "value": "alice@example.com", "otp": "123456",
        })
        assert response.status_code == 400

    def test_expired_otps_are_purged(self, client, db_session):
        register(client)
        db_session.add(OTP(
            value="alice@example.com",
            otp="111111",
            expires_at=datetime.utcnow() - timedelta(minutes=1),
        ))
        db_session.commit()

        client.post(f"{API}/initiate-forgot-password", json={
            "type": "email", "value": "alice@example.com",
        })

        db_session.expire_all()
        assert db_session.query(OTP).filter(OTP.expires_at < datetime.utcnow()).count() == 0

    def test_forgot_password_is_rate_limited(self, client):
        register(client)
        body = {"type": "email", "value": "alice@example.com"}

        for _ in range(5):
            assert client.post(f"{API}/initiate-forgot-password", json=body).status_code == 200

        response = client.post(f"{API}/initiate-forgot-password", json=body)
        assert response.status_code == 429
        assert response.json()["success"] is False
