import unittest
from unittest.mock import patch

from app.services.gateway import GatewayError, GatewayUnavailable

from support import client_for, make_token


class LoginTests(unittest.TestCase):
    def setUp(self):
        self.client = client_for()

    def test_login_page(self):
        response = self.client.get("/login")
        self.assertEqual(response.status_code, 200)
        self.assertIn("Welcome back", response.text)

    @patch("app.services.user_service.login")
    def test_login_sends_user_to_role_home(self, login):
        login.return_value = make_token("TRAVEL_AGENT", user_id=12, name="Ravi")

        response = self.client.post("/login", data={"email": "ravi@example.com", "password": "Travel@2025"})

        self.assertEqual(response.status_code, 303)
        self.assertTrue(response.headers["location"].endswith("/agent"))
        self.assertIn("access_token", response.cookies)

    @patch("app.services.user_service.login")
    def test_token_without_roles_is_denied(self, login):
        login.return_value = make_token(role=None)

        response = self.client.post("/login", data={"email": "asha@example.com", "password": "Travel@2025"})

        self.assertEqual(response.status_code, 403)
        self.assertIn("Access denied: No roles assigned.", response.text)
        self.assertNotIn("access_token", response.cookies)

    @patch("app.services.user_service.login")
    def test_network_error(self, login):
        login.side_effect = GatewayUnavailable("down")
        response = self.client.post("/login", data={"email": "asha@example.com", "password": "x"})
        self.assertEqual(response.status_code, 503)
        self.assertIn("Login failed: Network error", response.text)

    @patch("app.services.user_service.login")
    def test_backend_message_is_shown(self, login):
        login.side_effect = GatewayError("Invalid credentials", 401)
        response = self.client.post("/login", data={"email": "asha@example.com", "password": "x"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("Invalid credentials", response.text)


class RegisterTests(unittest.TestCase):
    def setUp(self):
        self.client = client_for()

    @patch("app.services.user_service.register")
    def test_mismatch_is_reported_with_weak_password(self, register):
        response = self.client.post("/register", data={
            "name": "Asha Rao",
            "email": "asha@example.com",
            "password": "password1",
            "confirm_password": "password2",
            "contact_number": "9876543210",
        })

        self.assertEqual(response.status_code, 400)
        self.assertIn("Passwords do not match", response.text)
        self.assertIn("Password must contain uppercase", response.text)
        register.assert_not_called()

    @patch("app.services.user_service.register")
    def test_successful_registration_redirects_to_login(self, register):
        response = self.client.post("/register", data={
            "name": "Asha Rao",
            "email": "asha@example.com",
            "password": "Travel@2025",
            "confirm_password": "Travel@2025",
            "contact_number": "9876543210",
        })

        self.assertEqual(response.status_code, 303)
        self.assertTrue(response.headers["location"].endswith("/login"))
        register.assert_called_once_with("Asha Rao", "asha@example.com", "Travel@2025", "9876543210")


class SessionTests(unittest.TestCase):
    def test_protected_page_requires_login(self):
        response = client_for().get("/dashboard")
        self.assertEqual(response.status_code, 302)
        self.assertTrue(response.headers["location"].endswith("/login"))
        self.assertIn("flash_error", response.headers["set-cookie"])

    def test_expired_session_is_cleared(self):
        client = client_for("USER", expired=True)
        response = client.get("/dashboard")
        self.assertEqual(response.status_code, 302)
        self.assertIn('access_token=""', response.headers["set-cookie"])

    def test_customer_cannot_open_admin(self):
        response = client_for("USER").get("/admin")
        self.assertEqual(response.status_code, 302)
        self.assertTrue(response.headers["location"].endswith("/login"))

    def test_logout_clears_session(self):
        response = client_for("USER").post("/logout")
        self.assertEqual(response.status_code, 303)
        self.assertIn("access_token", response.headers["set-cookie"])


if __name__ == "__main__":
    unittest.main()
