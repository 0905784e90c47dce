"""
Tests for the Flask API (no network: fetch_diplomas is patched).
"""

import unittest
from unittest import mock

from diplomas.api import create_app
from diplomas.errors import AuthenticationError, ConfigError, FetchError
from diplomas.model import Diploma


def _creds():
    return "user", "secret"


class TestDiplomasEndpoint(unittest.TestCase):
    def setUp(self) -> None:
        self.client = create_app(credentials_loader=_creds).test_client()

    @mock.patch("diplomas.api.fetch_diplomas")
    def test_success_returns_wire_format(self, fetch_mock: mock.Mock) -> None:
        fetch_mock.return_value = [
            Diploma(title="Thesis A", student="Ана Петровска", mentor="Проф. Марковски", file_url="/files/123.pdf")
        ]

        resp = self.client.get("/diplomas")

        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertEqual(len(data), 1)
        self.assertEqual(
            set(data[0]),
            {"title", "student", "mentor", "member1", "member2", "dateOfSubmission", "status", "description", "fileUrl"},
        )
        self.assertEqual(data[0]["student"], "Ана Петровска")
        self.assertEqual(data[0]["fileUrl"], "/files/123.pdf")
        self.assertEqual(fetch_mock.call_args.args[:2], ("user", "secret"))

    @mock.patch("diplomas.api.fetch_diplomas")
    def test_authentication_failure_is_401(self, fetch_mock: mock.Mock) -> None:
        fetch_mock.side_effect = AuthenticationError("public page")
        resp = self.client.get("/diplomas")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.get_json(), {"error": "Authentication failed"})

    @mock.patch("diplomas.api.fetch_diplomas")
    def test_fetch_failure_is_500(self, fetch_mock: mock.Mock) -> None:
        fetch_mock.side_effect = FetchError("unreachable")
        with self.assertLogs("diplomas.api", level="ERROR"):
            resp = self.client.get("/diplomas")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.get_json(), {"error": "Failed to fetch diplomas"})

    @mock.patch("diplomas.api.fetch_diplomas")
    def test_unexpected_exception_is_500(self, fetch_mock: mock.Mock) -> None:
        fetch_mock.side_effect = RuntimeError("parser exploded")
        with self.assertLogs("diplomas.api", level="ERROR"):
            resp = self.client.get("/diplomas")
        self.assertEqual(resp.status_code, 500)

    def test_missing_credentials_is_500(self) -> None:
        def _missing():
            raise ConfigError("no credentials")

        client = create_app(credentials_loader=_missing).test_client()
        with self.assertLogs("diplomas.api", level="ERROR"):
            resp = client.get("/diplomas")
        self.assertEqual(resp.status_code, 500)

    @mock.patch("diplomas.api.fetch_diplomas")
    def test_cors_header(self, fetch_mock: mock.Mock) -> None:
        fetch_mock.return_value = []
        resp = self.client.get("/diplomas", headers={"Origin": "https://dashboard.example.test"})
        self.assertIn(resp.headers.get("Access-Control-Allow-Origin"), ("*", "https://dashboard.example.test"))
        self.assertEqual(resp.get_json(), [])


class TestOtherEndpoints(unittest.TestCase):
    def setUp(self) -> None:
        self.client = create_app(credentials_loader=_creds).test_client()

    @mock.patch("diplomas.api.fetch_diplomas")
    def test_mentors(self, fetch_mock: mock.Mock) -> None:
        fetch_mock.return_value = [
            Diploma(title="A", mentor="X"),
            Diploma(title="B", mentor="Y"),
            Diploma(title="C", mentor="Y"),
        ]
        data = self.client.get("/mentors").get_json()
        self.assertEqual([(m["mentor"], m["totalDiplomas"]) for m in data], [("Y", 2), ("X", 1)])

    @mock.patch("diplomas.api.fetch_diplomas")
    def test_mentors_search_keeps_totals(self, fetch_mock: mock.Mock) -> None:
        fetch_mock.return_value = [
            Diploma(title="Веб апликација", mentor="X", status="Архива"),
            Diploma(title="Компајлер", mentor="X"),
            Diploma(title="Машинско учење", mentor="Y"),
        ]
        data = self.client.get("/mentors", query_string={"search": "веб"}).get_json()

        self.assertEqual(len(data), 1)
        self.assertEqual(data[0]["mentor"], "X")
        self.assertEqual(data[0]["totalDiplomas"], 2)
        self.assertEqual(data[0]["filteredDiplomas"], 1)
        self.assertEqual(data[0]["progress"], 1.0)

    @mock.patch("diplomas.api.fetch_diplomas")
    def test_stats(self, fetch_mock: mock.Mock) -> None:
        fetch_mock.return_value = [
            Diploma(title="A", mentor="X"),
            Diploma(title="B", mentor="Y"),
            Diploma(title="C", mentor="Y"),
            Diploma(title="D", mentor=""),
        ]
        resp = self.client.get("/stats")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.get_json(),
            {"totalMentors": 2, "totalDiplomas": 4, "averagePerMentor": 2.0, "medianPerMentor": 1.5},
        )

    @mock.patch("diplomas.api.fetch_diplomas")
    def test_stats_fetch_failure(self, fetch_mock: mock.Mock) -> None:
        fetch_mock.side_effect = FetchError("unreachable")
        with self.assertLogs("diplomas.api", level="ERROR"):
            resp = self.client.get("/stats")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.get_json(), {"error": "Failed to fetch diplomas"})

    @mock.patch("diplomas.api.fetch_diplomas")
    def test_mentors_authentication_failure(self, fetch_mock: mock.Mock) -> None:
        fetch_mock.side_effect = AuthenticationError("public page")
        self.assertEqual(self.client.get("/mentors").status_code, 401)

    def test_health(self) -> None:
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json(), {"status": "ok"})


if __name__ == "__main__":
    unittest.main()
