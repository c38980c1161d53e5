import unittest
from unittest.mock import MagicMock, patch

import requests

from app.services.gateway import GatewayError, GatewayUnavailable, api_request, error_message


def fake_response(status_code=200, body=None, text=None, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.reason = reason
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    response.text = text if text is not None else ("" if body is None else "json")
    response.content = response.text.encode()
    return response


class ErrorMessageTests(unittest.TestCase):
    def test_prefers_message_then_error_then_detail(self):
        self.assertEqual(error_message(fake_response(400, {"message": "Email already exists"})), "Email already exists")
        self.assertEqual(error_message(fake_response(400, {"error": "Bad Request"})), "Bad Request")
        self.assertEqual(error_message(fake_response(400, {"detail": "Nope"})), "Nope")

    def test_falls_back_to_text_then_reason(self):
        self.assertEqual(error_message(fake_response(500, text="Invalid credentials")), "Invalid credentials")
        self.assertEqual(error_message(fake_response(502, text="", reason="Bad Gateway")), "Bad Gateway")


class ApiRequestTests(unittest.TestCase):
    @patch("app.services.gateway.requests.request")
    def test_sends_bearer_token_and_returns_json(self, request):
        request.return_value = fake_response(200, {"bookingId": 41})

        result = api_request("GET", "http://gateway/api/bookings/41", token="abc")

        self.assertEqual(result, {"bookingId": 41})
        headers = request.call_args.kwargs["headers"]
        self.assertEqual(headers["Authorization"], "Bearer abc")
        self.assertIn("timeout", request.call_args.kwargs)

    @patch("app.services.gateway.requests.request")
    def test_no_token_no_authorization_header(self, request):
        request.return_value = fake_response(200, [])
        api_request("GET", "http://gateway/api/packages/")
        self.assertNotIn("Authorization", request.call_args.kwargs["headers"])

    @patch("app.services.gateway.requests.request")
    def test_empty_body_is_none(self, request):
        request.return_value = fake_response(200, text="")
        self.assertIsNone(api_request("DELETE", "http://gateway/api/users/3", token="abc"))

    @patch("app.services.gateway.requests.request")
    def test_plain_text_body(self, request):
        request.return_value = fake_response(200, text="eyJ.token.value")
        self.assertEqual(api_request("POST", "http://gateway/api/users/login"), "eyJ.token.value")

    @patch("app.services.gateway.requests.request")
    def test_error_status_raises_with_backend_message(self, request):
        request.return_value = fake_response(409, {"message": "Email already exists"})

        with self.assertRaises(GatewayError) as ctx:
            api_request("POST", "http://gateway/api/users")

        self.assertEqual(ctx.exception.message, "Email already exists")
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertFalse(ctx.exception.not_found)

    @patch("app.services.gateway.requests.request")
    def test_network_failure_is_unavailable(self, request):
        request.side_effect = requests.ConnectionError("refused")

        with self.assertRaises(GatewayUnavailable) as ctx:
            api_request("GET", "http://gateway/api/packages/")

        self.assertIsNone(ctx.exception.status_code)
        self.assertIn("unavailable", ctx.exception.message)


if __name__ == "__main__":
    unittest.main()
