import unittest
from unittest import mock

from eth_account import Account
from eth_account.messages import encode_defunct
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from foodprint.core.auth import create_session_token
from foodprint.core.config import get_settings
from foodprint.core.exceptions import InternalError
from foodprint.database import get_session
from foodprint.main import app
from foodprint.repositories.user_repo import UserRepository
from foodprint.routers.wallet import get_wallet_service
from foodprint.services.wallet_service import WalletService

from tests.support import ADDRESS, ADDRESS_LOWER, make_engine, make_session

settings = get_settings()


class WalletApiTestCase(unittest.TestCase):

    def setUp(self):
        self.engine = make_engine()

        def override_get_session():
            with make_session(self.engine) as session:
                yield session

        app.dependency_overrides[get_session] = override_get_session
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.engine.dispose()

    def connect(self, **body):
        payload = {"walletAddress": ADDRESS, "userRole": "farmer"}
        payload.update(body)
        return self.client.post("/app/wallet/connect", json=payload)


class TestConnectEndpoint(WalletApiTestCase):

    def test_connect_new_wallet(self):
        resp = self.connect()

        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertTrue(data["success"])
        self.assertEqual(data["walletAddress"], ADDRESS_LOWER)
        self.assertEqual(data["userRole"], "farmer")
        self.assertTrue(data["accessToken"])
        self.assertIn(settings.SESSION_COOKIE_NAME, resp.cookies)

    def test_invalid_address(self):
        resp = self.connect(walletAddress="0x1234")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(
            resp.json(),
            {"success": False, "message": "Invalid wallet address format."},
        )

    def test_missing_address(self):
        resp = self.client.post("/app/wallet/connect", json={"userRole": "farmer"})
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()["success"])

    def test_invalid_role(self):
        resp = self.connect(userRole="consumer")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("Invalid role", resp.json()["message"])

    def test_signature_mismatch(self):
        signer = Account.create()
        message = "FoodPrint: Link wallet"
        signed = signer.sign_message(encode_defunct(text=message))
        resp = self.connect(
            signature="0x" + bytes(signed.signature).hex(),
            message=message,
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("mismatch", resp.json()["message"])

    def test_signed_connect(self):
        signer = Account.create()
        message = f"FoodPrint: Link wallet {signer.address} as retailer"
        signed = signer.sign_message(encode_defunct(text=message))
        resp = self.connect(
            walletAddress=signer.address,
            userRole="retailer",
            signature="0x" + bytes(signed.signature).hex(),
            message=message,
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["walletAddress"], signer.address.lower())

    def test_required_signature_setting(self):
        app.dependency_overrides[get_wallet_service] = lambda: WalletService(
            UserRepository(), require_signature=True
        )
        resp = self.connect()
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Signature and message are required.")

    def test_internal_error_includes_cause(self):
        with mock.patch.object(
            WalletService,
            "connect",
            side_effect=InternalError("Error connecting wallet: disk full"),
        ):
            resp = self.connect()
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["message"], "Error connecting wallet: disk full")


class TestSessionEndpoints(WalletApiTestCase):

    def test_status_requires_session(self):
        resp = self.client.get("/app/wallet/status")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(
            resp.json(), {"success": False, "message": "User not authenticated."}
        )

    def test_status_without_session_does_not_touch_storage(self):
        fake_session = mock.MagicMock()

        def override_get_session():
            yield fake_session

        app.dependency_overrides[get_session] = override_get_session
        resp = self.client.get("/app/wallet/status")

        self.assertEqual(resp.status_code, 401)
        self.assertEqual(fake_session.method_calls, [])

    def test_disconnect_requires_session(self):
        resp = self.client.post("/app/wallet/disconnect")
        self.assertEqual(resp.status_code, 401)

    def test_garbage_token_is_unauthenticated(self):
        resp = self.client.get(
            "/app/wallet/status",
            headers={"Authorization": "Bearer not-a-token"},
        )
        self.assertEqual(resp.status_code, 401)

    def test_expired_token_is_unauthenticated(self):
        token = self.connect().json()["accessToken"]
        self.assertTrue(token)
        expired = create_session_token(1, ttl_minutes=-5)
        self.client.cookies.clear()
        resp = self.client.get(
            "/app/wallet/status",
            headers={"Authorization": f"Bearer {expired}"},
        )
        self.assertEqual(resp.status_code, 401)

    def test_status_after_connect_via_cookie(self):
        self.connect(userRole="wholesaler")

        resp = self.client.get("/app/wallet/status")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {
                "success": True,
                "walletConnected": True,
                "walletAddress": ADDRESS_LOWER,
                "userRole": "wholesaler",
            },
        )

    def test_disconnect_then_status_via_bearer(self):
        token = self.connect(userRole="retailer").json()["accessToken"]
        self.client.cookies.clear()
        headers = {"Authorization": f"Bearer {token}"}

        resp = self.client.post("/app/wallet/disconnect", headers=headers)
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["success"])

        status = self.client.get("/app/wallet/status", headers=headers).json()
        self.assertFalse(status["walletConnected"])
        self.assertIsNone(status["walletAddress"])
        self.assertEqual(status["userRole"], "retailer")

    def test_database_failure_loading_session_user_is_json(self):
        token = self.connect().json()["accessToken"]
        self.client.cookies.clear()
        error = OperationalError("SELECT", {}, Exception("db down"))

        with mock.patch.object(Session, "get", side_effect=error):
            resp = self.client.get(
                "/app/wallet/status",
                headers={"Authorization": f"Bearer {token}"},
            )

        self.assertEqual(resp.status_code, 500)
        self.assertTrue(resp.headers["content-type"].startswith("application/json"))
        self.assertEqual(
            resp.json(), {"success": False, "message": "Database error: db down"}
        )

    def test_token_for_deleted_user_is_unauthenticated(self):
        # The session user is gone before the status service runs
        token = create_session_token(424242)
        resp = self.client.get(
            "/app/wallet/status",
            headers={"Authorization": f"Bearer {token}"},
        )
        self.assertEqual(resp.status_code, 401)

    def test_reconnect_after_disconnect_reports_driver_message(self):
        token = self.connect().json()["accessToken"]
        self.client.post(
            "/app/wallet/disconnect", headers={"Authorization": f"Bearer {token}"}
        )
        self.client.cookies.clear()

        resp = self.connect()

        self.assertEqual(resp.status_code, 500)
        message = resp.json()["message"]
        self.assertIn("UNIQUE constraint failed", message)
        self.assertNotIn("INSERT", message)

    def test_users_me(self):
        self.connect()
        resp = self.client.get("/app/users/me")

        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["phone_number"], "wallet_abcdef0123")
        self.assertEqual(data["role"], "Farmer")
        self.assertNotIn("password", data)


class TestIdentifierImageUpload(WalletApiTestCase):

    def test_upload_without_storage_uses_local_url(self):
        self.connect()
        resp = self.client.post(
            "/app/users/me/identifier-image",
            files={"file": ("id.PNG", b"\x89PNG fake", "image/png")},
        )
        self.assertEqual(resp.status_code, 200)
        url = resp.json()["user_identifier_image_url"]
        self.assertTrue(url.startswith("/uploads/user_1_"))
        self.assertTrue(url.endswith(".png"))

    def test_upload_rejects_unsupported_type(self):
        self.connect()
        resp = self.client.post(
            "/app/users/me/identifier-image",
            files={"file": ("id.txt", b"hello", "text/plain")},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()["success"])


if __name__ == "__main__":
    unittest.main()
