"""
Route tests with the hosted services replaced by in-memory fakes.
"""
import unittest
import uuid
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from app.api import deps
from app.core.state import SessionRegistry
from app.main import app
from certify.quiz.gemini.generate import QuizGenerationError
from certify.sources.transcript import TranscriptUnavailable
from certify.store.certificates import CertificateRepository, certificate_to_row
from fakes import (
    FakeCertificateRepository,
    FakeIdentityProvider,
    correct_answers,
    make_certificate,
    make_quiz,
    wrong_answer,
)


class ApiTestCase(unittest.TestCase):

    def setUp(self):
        self.identity = FakeIdentityProvider()
        self.registry = SessionRegistry()
        self.repo = FakeCertificateRepository()
        self.quiz = make_quiz()
        self.generated = []

        def fake_generator(video_url):
            if not video_url.strip():
                raise ValueError("Please provide the video URL.")
            self.generated.append(video_url)
            return self.quiz

        app.dependency_overrides[deps.get_identity] = lambda: self.identity
        app.dependency_overrides[deps.get_registry] = lambda: self.registry
        app.dependency_overrides[deps.get_certificate_repository] = lambda: self.repo
        app.dependency_overrides[deps.get_quiz_generator] = lambda: fake_generator
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def register(self, username="ada", email="ada@example.com", password="secret"):
        res = self.client.post(
            "/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        self.assertEqual(res.status_code, 200, res.text)
        return {"Authorization": f"Bearer {res.json()['access_token']}"}


class TestHealth(ApiTestCase):

    def test_health(self):
        self.assertEqual(self.client.get("/health").json(), {"status": "ok"})


class TestAuthRoutes(ApiTestCase):

    def test_register_opens_session(self):
        headers = self.register()
        res = self.client.get("/auth/session", headers=headers)
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["username"], "ada")

    def test_register_missing_fields(self):
        res = self.client.post("/auth/register", json={"email": "ada@example.com"})
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["detail"], "All fields are required")

    def test_register_duplicate(self):
        self.register()
        res = self.client.post(
            "/auth/register",
            json={"username": "ada", "email": "ada@example.com", "password": "x"},
        )
        self.assertEqual(res.status_code, 400)

    def test_login(self):
        self.register()
        res = self.client.post("/auth/login", json={"email": "ada@example.com", "password": "secret"})
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.json()["access_token"])

    def test_login_wrong_password(self):
        self.register()
        res = self.client.post("/auth/login", json={"email": "ada@example.com", "password": "nope"})
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.json()["detail"], "Invalid login credentials")

    def test_session_requires_token(self):
        self.assertEqual(self.client.get("/auth/session").status_code, 401)

    def test_session_unknown_token(self):
        res = self.client.get("/auth/session", headers={"Authorization": "Bearer nope"})
        self.assertEqual(res.status_code, 401)

    def test_logout_clears_session(self):
        headers = self.register()
        token = headers["Authorization"].split()[1]

        res = self.client.post("/auth/logout", headers=headers)

        self.assertEqual(res.status_code, 200)
        self.assertIsNone(self.registry.get(token))
        self.assertIn(token, self.identity.signed_out)
        self.assertEqual(self.client.get("/auth/session", headers=headers).status_code, 401)


class TestQuizRoutes(ApiTestCase):

    def generate(self, headers):
        res = self.client.post(
            "/quiz/generate",
            json={"video_url": self.quiz.video_url},
            headers=headers,
        )
        self.assertEqual(res.status_code, 200, res.text)
        return res.json()

    def test_generate_hides_answer_key(self):
        headers = self.register()
        body = self.generate(headers)

        self.assertEqual(body["quiz_id"], self.quiz.id)
        self.assertEqual(len(body["questions"]), 5)
        for q in body["questions"]:
            self.assertNotIn("correct_answer_index", q)
            self.assertNotIn("correctAnswerIndex", q)
            self.assertEqual(len(q["options"]), 4)

    def test_generate_requires_login(self):
        res = self.client.post("/quiz/generate", json={"video_url": "x"})
        self.assertEqual(res.status_code, 401)
        self.assertEqual(self.generated, [])

    def test_generate_blank_url(self):
        headers = self.register()
        res = self.client.post("/quiz/generate", json={"video_url": " "}, headers=headers)
        self.assertEqual(res.status_code, 400)

    def test_generate_failure(self):
        def failing(video_url):
            raise QuizGenerationError("Failed to generate quiz. Please check the URL or try again.")

        app.dependency_overrides[deps.get_quiz_generator] = lambda: failing
        headers = self.register()
        res = self.client.post("/quiz/generate", json={"video_url": "u"}, headers=headers)
        self.assertEqual(res.status_code, 502)
        self.assertIn("Failed to generate quiz", res.json()["detail"])

    def test_current_quiz(self):
        headers = self.register()
        self.assertEqual(self.client.get("/quiz/current", headers=headers).status_code, 404)
        self.generate(headers)
        res = self.client.get("/quiz/current", headers=headers)
        self.assertEqual(res.json()["quiz_id"], self.quiz.id)

    def test_submit_passing_issues_certificate(self):
        headers = self.register()
        self.generate(headers)

        res = self.client.post(
            "/quiz/submit",
            json={"quiz_id": self.quiz.id, "answers": correct_answers(self.quiz.questions)},
            headers=headers,
        )

        body = res.json()
        self.assertEqual(res.status_code, 200, res.text)
        self.assertEqual(body["score_percentage"], 100)
        self.assertTrue(body["passed"])
        self.assertEqual(body["certificate_status"], "issued")
        self.assertTrue(body["certificate_saved"])
        self.assertIn(body["certificate"]["id"], self.repo.saved)
        # quiz is consumed
        self.assertEqual(self.client.get("/quiz/current", headers=headers).status_code, 404)

    def test_submit_failing_writes_nothing(self):
        headers = self.register()
        self.generate(headers)
        answers = correct_answers(self.quiz.questions)
        answers[0] = wrong_answer(self.quiz.questions[0])
        answers[1] = None

        res = self.client.post(
            "/quiz/submit",
            json={"quiz_id": self.quiz.id, "answers": answers},
            headers=headers,
        )

        body = res.json()
        self.assertEqual(body["score_percentage"], 60)
        self.assertFalse(body["passed"])
        self.assertEqual(body["certificate_status"], "not_passed")
        self.assertIsNone(body["certificate"])
        self.assertEqual(self.repo.saved, {})

    def test_submit_save_failure_is_visible(self):
        self.repo.fail_save = True
        headers = self.register()
        self.generate(headers)

        res = self.client.post(
            "/quiz/submit",
            json={"quiz_id": self.quiz.id, "answers": correct_answers(self.quiz.questions)},
            headers=headers,
        )

        body = res.json()
        self.assertTrue(body["passed"])
        self.assertFalse(body["certificate_saved"])
        self.assertEqual(body["certificate_status"], "save_failed")
        # still there for a retry
        self.assertEqual(self.client.get("/quiz/current", headers=headers).status_code, 200)

    def test_submit_wrong_quiz_id(self):
        headers = self.register()
        self.generate(headers)
        res = self.client.post("/quiz/submit", json={"quiz_id": "QZ_other", "answers": []}, headers=headers)
        self.assertEqual(res.status_code, 404)

    def test_submit_empty_quiz(self):
        self.quiz = make_quiz(questions=[])
        headers = self.register()
        self.generate(headers)
        res = self.client.post("/quiz/submit", json={"quiz_id": self.quiz.id, "answers": []}, headers=headers)
        self.assertEqual(res.status_code, 400)

    def test_submit_out_of_range_answer(self):
        headers = self.register()
        self.generate(headers)
        res = self.client.post(
            "/quiz/submit",
            json={"quiz_id": self.quiz.id, "answers": [9]},
            headers=headers,
        )
        self.assertEqual(res.status_code, 400)


class TestCertificateRoutes(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.cert = make_certificate(user_id="user-1")
        self.repo.saved[self.cert.id] = self.cert

    def test_dashboard_lists_own_certificates(self):
        headers = self.register()  # becomes user-1
        self.repo.saved["other"] = make_certificate(cert_id=str(uuid.uuid4()), user_id="user-9")

        res = self.client.get("/certificates", headers=headers)

        ids = [c["id"] for c in res.json()["certificates"]]
        self.assertEqual(ids, [self.cert.id])

    def test_dashboard_store_down(self):
        headers = self.register()
        self.repo.unavailable = True
        self.assertEqual(self.client.get("/certificates", headers=headers).status_code, 503)

    def test_dashboard_survives_unreadable_row(self):
        headers = self.register()
        bad = certificate_to_row(make_certificate(cert_id=str(uuid.uuid4())))
        bad["questions"][0]["options"] = ["a", "b"]
        bad["questions"][0]["correctAnswerIndex"] = 7
        client = MagicMock()
        query = client.table.return_value.select.return_value.eq.return_value
        query.order.return_value.execute.return_value = MagicMock(
            data=[bad, certificate_to_row(self.cert)]
        )
        repo = CertificateRepository(client=client, table="certificates")
        app.dependency_overrides[deps.get_certificate_repository] = lambda: repo

        res = self.client.get("/certificates", headers=headers)

        self.assertEqual(res.status_code, 200)
        self.assertEqual([c["id"] for c in res.json()["certificates"]], [self.cert.id])

    def test_verify_found(self):
        res = self.client.get(f"/certificates/verify/{self.cert.id}")
        body = res.json()
        self.assertEqual(res.status_code, 200)
        self.assertTrue(body["valid"])
        self.assertEqual(body["status"], "found")
        self.assertEqual(body["certificate"]["user_name"], "ada")
        self.assertEqual(body["certificate"]["topic"], self.cert.topic)

    def test_verify_not_found_never_errors(self):
        res = self.client.get(f"/certificates/verify/{uuid.uuid4()}")
        body = res.json()
        self.assertEqual(res.status_code, 200)
        self.assertFalse(body["valid"])
        self.assertEqual(body["status"], "not_found")

    def test_verify_unavailable_is_distinct(self):
        self.repo.unavailable = True
        body = self.client.get(f"/certificates/verify/{self.cert.id}").json()
        self.assertFalse(body["valid"])
        self.assertEqual(body["status"], "unavailable")

    def test_review(self):
        res = self.client.get(f"/certificates/{self.cert.id}/review")
        body = res.json()
        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(body["items"]), 5)
        self.assertTrue(all(item["correct"] for item in body["items"]))

    def test_review_not_found(self):
        res = self.client.get(f"/certificates/{uuid.uuid4()}/review")
        self.assertEqual(res.status_code, 404)


class TestTranscriptRoute(ApiTestCase):

    def test_missing_url(self):
        self.assertEqual(self.client.get("/api/transcript").status_code, 400)

    def test_transcript(self):
        with patch("app.api.transcript_routes.fetch_transcript_text", return_value="hello world"):
            res = self.client.get("/api/transcript", params={"url": "https://youtu.be/dQw4w9WgXcQ"})
        self.assertEqual(res.json(), {"transcript": "hello world"})

    def test_transcript_failure(self):
        with patch(
            "app.api.transcript_routes.fetch_transcript_text",
            side_effect=TranscriptUnavailable("disabled"),
        ):
            res = self.client.get("/api/transcript", params={"url": "https://youtu.be/dQw4w9WgXcQ"})
        self.assertEqual(res.status_code, 502)


if __name__ == "__main__":
    unittest.main()
