"""Tests for the forgot-password / verify / reset flow."""

import time
from unittest.mock import patch

from fastapi.testclient import TestClient
from kombu.exceptions import OperationalError

from src.database import get_db
from src.main import app

GENERIC_MESSAGE = "If an account exists for this email, a reset code has been sent."


def request_code(client, email_service, email):
    response = client.post("/api/auth/forgot-password", json={"email": email})
    assert response.status_code == 200
    return email_service.reset_codes.get(email)


def wrong(code):
    return "000000" if code != "000000" else "111111"


def test_forgot_password_sends_code(client, auth_headers, email_service, otp_store):
    response = client.post("/api/auth/forgot-password", json={"email": auth_headers.email})
    assert response.status_code == 200
    assert response.json()["message"] == GENERIC_MESSAGE
    assert response.json()["expiresInSeconds"] == 600

    code = email_service.reset_codes[auth_headers.email]
    assert otp_store.get(auth_headers.email).code == code
    assert email_service.sent[-1]["to"] == auth_headers.email
    assert code in email_service.sent[-1]["html"]


def test_forgot_password_unknown_email_looks_the_same(client, auth_headers, email_service):
    known = client.post("/api/auth/forgot-password", json={"email": auth_headers.email})
    unknown = client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})
    assert unknown.status_code == known.status_code == 200
    assert unknown.json() == known.json()
    assert "ghost@example.com" not in email_service.reset_codes


def test_forgot_password_invalid_email(client):
    response = client.post("/api/auth/forgot-password", json={"email": "nope"})
    assert response.status_code == 400


def test_verify_otp(client, auth_headers, email_service, otp_store):
    code = request_code(client, email_service, auth_headers.email)
    response = client.post(
        "/api/auth/verify-otp", json={"email": auth_headers.email, "otp": code}
    )
    assert response.status_code == 200
    # Still usable for the reset step
    assert otp_store.get(auth_headers.email) is not None


def test_verify_otp_wrong_code(client, auth_headers, email_service):
    code = request_code(client, email_service, auth_headers.email)
    response = client.post(
        "/api/auth/verify-otp", json={"email": auth_headers.email, "otp": wrong(code)}
    )
    assert response.status_code == 400
    assert "2 attempts remaining" in response.json()["detail"]


def test_verify_otp_rejects_malformed_code(client, auth_headers):
    response = client.post("/api/auth/verify-otp", json={"email": auth_headers.email, "otp": "12ab"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid input"


def test_verify_otp_unknown_email_matches_missing_code(client, auth_headers):
    unknown = client.post(
        "/api/auth/verify-otp", json={"email": "ghost@example.com", "otp": "123456"}
    )
    no_code = client.post(
        "/api/auth/verify-otp", json={"email": auth_headers.email, "otp": "123456"}
    )
    assert unknown.status_code == no_code.status_code == 400
    assert unknown.json() == no_code.json()


def test_reset_password(client, auth_headers, email_service, otp_store):
    code = request_code(client, email_service, auth_headers.email)

    response = client.post(
        "/api/auth/reset-password",
        json={"email": auth_headers.email, "otp": code, "newPassword": "fresh-pass"},
    )
    assert response.status_code == 200
    assert otp_store.get(auth_headers.email) is None
    assert email_service.sent[-1]["subject"].endswith("Your password was reset")

    old_login = client.post(
        "/api/auth/login", json={"email": auth_headers.email, "password": "testpass123"}
    )
    new_login = client.post(
        "/api/auth/login", json={"email": auth_headers.email, "password": "fresh-pass"}
    )
    assert old_login.status_code == 401
    assert new_login.status_code == 200


def test_reset_password_code_is_single_use(client, auth_headers, email_service):
    code = request_code(client, email_service, auth_headers.email)
    payload = {"email": auth_headers.email, "otp": code, "newPassword": "fresh-pass"}

    assert client.post("/api/auth/reset-password", json=payload).status_code == 200
    assert client.post("/api/auth/reset-password", json=payload).status_code == 400


def test_reset_password_after_exhausted_attempts(client, auth_headers, email_service):
    code = request_code(client, email_service, auth_headers.email)
    for _ in range(3):
        response = client.post(
            "/api/auth/verify-otp", json={"email": auth_headers.email, "otp": wrong(code)}
        )
        assert response.status_code == 400

    response = client.post(
        "/api/auth/reset-password",
        json={"email": auth_headers.email, "otp": code, "newPassword": "fresh-pass"},
    )
    assert response.status_code == 400
    assert "Too many failed attempts" in response.json()["detail"]


def test_reset_password_short_password(client, auth_headers, email_service):
    code = request_code(client, email_service, auth_headers.email)
    response = client.post(
        "/api/auth/reset-password",
        json={"email": auth_headers.email, "otp": code, "newPassword": "123"},
    )
    assert response.status_code == 400


def test_reset_password_for_deleted_account(client, auth_headers, email_service, otp_store):
    code = request_code(client, email_service, auth_headers.email)
    # Account deletion normally clears the code; simulate a code that outlived its account
    entry = otp_store.get(auth_headers.email)
    client.delete("/api/auth/profile", headers=auth_headers)
    otp_store.set(entry)

    response = client.post(
        "/api/auth/reset-password",
        json={"email": auth_headers.email, "otp": code, "newPassword": "fresh-pass"},
    )
    assert response.status_code == 404


def test_account_deletion_clears_code(client, auth_headers, email_service, otp_store):
    request_code(client, email_service, auth_headers.email)
    client.delete("/api/auth/profile", headers=auth_headers)
    assert otp_store.get(auth_headers.email) is None


def test_forgot_password_does_not_wait_on_delivery(client, auth_headers, otp_store):
    def slow_send(*args, **kwargs):
        time.sleep(0.5)
        return True

    with (
        patch("src.tasks.email.send_password_reset_code.delay") as mock_task,
        patch("src.services.email.EmailService.send", side_effect=slow_send) as mock_send,
    ):
        start = time.perf_counter()
        known = client.post("/api/auth/forgot-password", json={"email": auth_headers.email})
        known_elapsed = time.perf_counter() - start

        start = time.perf_counter()
        unknown = client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})
        unknown_elapsed = time.perf_counter() - start

    assert known.json() == unknown.json()
    assert abs(known_elapsed - unknown_elapsed) < 0.2
    mock_send.assert_not_called()
    code = otp_store.get(auth_headers.email).code
    mock_task.assert_called_once_with(auth_headers.email, code, "Test User")


def test_forgot_password_when_broker_is_down(client, auth_headers, otp_store):
    with patch(
        "src.tasks.email.send_password_reset_code.delay",
        side_effect=OperationalError("connection refused"),
    ):
        response = client.post("/api/auth/forgot-password", json={"email": auth_headers.email})

    assert response.status_code == 200
    assert response.json()["message"] == GENERIC_MESSAGE
    assert otp_store.get(auth_headers.email) is not None


def test_reset_password_queues_confirmation(client, auth_headers, email_service):
    code = request_code(client, email_service, auth_headers.email)
    with patch("src.tasks.email.send_password_reset_success.delay") as mock_task:
        response = client.post(
            "/api/auth/reset-password",
            json={"email": auth_headers.email, "otp": code, "newPassword": "fresh-pass"},
        )

    assert response.status_code == 200
    mock_task.assert_called_once_with(auth_headers.email, "Test User")


def test_requests_share_the_store_built_at_startup(db, email_service):
    app.dependency_overrides[get_db] = lambda: db
    try:
        with TestClient(app) as test_client:
            test_client.post(
                "/api/auth/signup", json={"email": "shared@example.com", "password": "testpass123"}
            )
            response = test_client.post(
                "/api/auth/forgot-password", json={"email": "shared@example.com"}
            )
            assert response.status_code == 200

            entry = app.state.otp_store.get("shared@example.com")
            assert entry.code == email_service.reset_codes["shared@example.com"]
    finally:
        app.dependency_overrides.clear()
