import unittest
from unittest.mock import patch

from app.services.gateway import GatewayError

from support import client_for


@patch("app.services.assistance_service.list_user_requests", return_value=[])
class AssistanceRequestTests(unittest.TestCase):
    def test_page_lists_faqs(self, list_user_requests):
        response = client_for().get("/assistance")
        self.assertEqual(response.status_code, 200)
        self.assertIn("Frequently Asked Questions", response.text)

    def test_faq_prefills_issue(self, list_user_requests):
        response = client_for("USER").get("/assistance?faq=0")
        self.assertEqual(response.status_code, 200)
        self.assertIn(">How do I change my booking dates?</textarea>", response.text)

    @patch("app.services.assistance_service.create_request")
    def test_empty_description_never_reaches_backend(self, create_request, list_user_requests):
        response = client_for().post("/assistance", data={"issue_description": "   ", "user_id": "7"})

        self.assertEqual(response.status_code, 400)
        self.assertIn("Issue Description is required.", response.text)
        create_request.assert_not_called()

    @patch("app.services.assistance_service.create_request")
    def test_guest_must_give_user_id(self, create_request, list_user_requests):
        response = client_for().post("/assistance", data={"issue_description": "Refund please"})

        self.assertEqual(response.status_code, 400)
        self.assertIn("User ID and Issue Description are required.", response.text)
        create_request.assert_not_called()

    @patch("app.services.assistance_service.create_request")
    def test_customer_request_uses_own_id(self, create_request, list_user_requests):
        create_request.return_value = {"requestId": 12, "status": "Pending"}

        response = client_for("USER").post("/assistance", data={"issue_description": "Refund please", "user_id": "99"})

        self.assertEqual(response.status_code, 200)
        self.assertIn("Request submitted successfully! Your Request ID is: 12. Status: Pending", response.text)
        self.assertEqual(create_request.call_args.args, (7, "Refund please"))


@patch("app.services.assistance_service.list_user_requests", return_value=[])
class ViewRequestTests(unittest.TestCase):
    TICKET = {"requestId": 5, "userId": 3, "issueDescription": "Lost luggage", "status": "Resolved",
              "resolutionMessage": "Found at the hotel"}

    @patch("app.services.assistance_service.get_request")
    def test_view_request(self, get_request, list_user_requests):
        get_request.return_value = dict(self.TICKET)
        response = client_for().post("/assistance/view", data={"request_id": "5", "user_id": "3"})
        self.assertEqual(response.status_code, 200)
        self.assertIn("Found at the hotel", response.text)

    @patch("app.services.assistance_service.get_request")
    def test_user_mismatch(self, get_request, list_user_requests):
        get_request.return_value = dict(self.TICKET)
        response = client_for().post("/assistance/view", data={"request_id": "5", "user_id": "4"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("Request ID does not match the provided User ID.", response.text)
        self.assertNotIn("Found at the hotel", response.text)

    @patch("app.services.assistance_service.get_request", side_effect=GatewayError("missing", 404))
    def test_not_found(self, get_request, list_user_requests):
        response = client_for().post("/assistance/view", data={"request_id": "5"})
        self.assertEqual(response.status_code, 404)
        self.assertIn("Request not found. Please check the ID.", response.text)

    @patch("app.services.assistance_service.get_request", return_value=None)
    def test_empty_response_counts_as_not_found(self, get_request, list_user_requests):
        response = client_for().post("/assistance/view", data={"request_id": "5", "user_id": "3"})
        self.assertEqual(response.status_code, 404)
        self.assertIn("Request not found. Please check the ID.", response.text)


class ResolveTests(unittest.TestCase):
    TICKET = {"requestId": 5, "userId": 3, "issueDescription": "Lost luggage", "status": "Pending"}

    def test_customers_cannot_resolve(self):
        response = client_for("USER").get("/assistance/5/resolve")
        self.assertEqual(response.status_code, 302)

    @patch("app.services.assistance_service.resolve_request")
    @patch("app.services.assistance_service.get_request")
    def test_empty_resolution(self, get_request, resolve_request):
        get_request.return_value = dict(self.TICKET)
        response = client_for("ADMIN", user_id=1).post("/assistance/5/resolve", data={"resolution_message": " "})
        self.assertEqual(response.status_code, 400)
        self.assertIn("Resolution message cannot be empty.", response.text)
        resolve_request.assert_not_called()

    @patch("app.services.assistance_service.resolve_request")
    def test_admin_resolves_request(self, resolve_request):
        response = client_for("ADMIN", user_id=1).post(
            "/assistance/5/resolve", data={"resolution_message": "Refund issued"}
        )
        self.assertEqual(response.status_code, 303)
        self.assertTrue(response.headers["location"].endswith("/admin/assistance"))
        self.assertEqual(resolve_request.call_args.args, (5, "Refund issued"))

    @patch("app.services.assistance_service.resolve_request")
    def test_agent_returns_to_inquiries(self, resolve_request):
        response = client_for("TRAVEL_AGENT", user_id=12).post(
            "/assistance/5/resolve", data={"resolution_message": "Refund issued"}
        )
        self.assertTrue(response.headers["location"].endswith("/agent/inquiries"))

    @patch("app.services.assistance_service.update_request_status")
    def test_unknown_status(self, update_request_status):
        response = client_for("ADMIN", user_id=1).post("/assistance/5/status", data={"status": "Closed"})
        self.assertEqual(response.status_code, 303)
        update_request_status.assert_not_called()


if __name__ == "__main__":
    unittest.main()
