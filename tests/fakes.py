"""
In-memory stand-ins for the hosted services, shared by the test modules.
"""
import json
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

from certify.models import Certificate, Quiz, QuizQuestion, User
from certify.store.identity import AuthenticationError, AuthResult
from certify.store.results import LookupResult, StoreUnavailable

PHOTOSYNTHESIS_TRANSCRIPT = (
    "Photosynthesis converts light into chemical energy. Plants capture sunlight "
    "with chlorophyll inside chloroplasts, split water, release oxygen and build "
    "glucose from carbon dioxide in the Calvin cycle."
)


def make_questions(count=5):
    return [
        QuizQuestion(
            question=f"Question {i + 1}?",
            options=[f"Option {i + 1}.{j}" for j in range(4)],
            correct_answer_index=i % 4,
        )
        for i in range(count)
    ]


def questions_payload(count=5):
    return [q.model_dump(by_alias=True) for q in make_questions(count)]


def correct_answers(questions):
    return [q.correct_answer_index for q in questions]


def wrong_answer(question):
    return (question.correct_answer_index + 1) % len(question.options)


def make_user(user_id="user-1", username="ada"):
    return User(
        id=user_id,
        username=username,
        email=f"{username}@example.com",
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def make_quiz(questions=None, topic="Photosynthesis Basics"):
    return Quiz(
        id="QZ_test00001",
        video_url="https://www.youtube.com/watch?v=abcdefghijk",
        topic=topic,
        channel_name="Science Channel",
        questions=make_questions() if questions is None else questions,
    )


def make_certificate(cert_id="2b1c8a0e-6f3d-4f5e-9a7b-1c2d3e4f5a6b", user_id="user-1", **kwargs):
    questions = kwargs.pop("questions", make_questions())
    if "user_answers" not in kwargs:
        kwargs["user_answers"] = correct_answers(questions) if questions else None
    return Certificate(
        id=cert_id,
        user_id=user_id,
        user_name=kwargs.pop("user_name", "ada"),
        video_url="https://www.youtube.com/watch?v=abcdefghijk",
        topic=kwargs.pop("topic", "Photosynthesis Basics"),
        channel_name="Science Channel",
        questions=questions,
        user_answers=kwargs.pop("user_answers"),
        score=kwargs.pop("score", 100),
        issued_at=kwargs.pop("issued_at", datetime(2024, 2, 1, tzinfo=timezone.utc)),
    )


def gemini_client(text):
    """Gemini client whose generate_content returns `text`."""
    client = MagicMock()
    client.models.generate_content.return_value = SimpleNamespace(text=text)
    return client


def gemini_client_for(payload):
    return gemini_client(json.dumps(payload))


class FakeCertificateRepository:
    def __init__(self, fail_save=False, unavailable=False):
        self.saved = {}
        self.fail_save = fail_save
        self.unavailable = unavailable

    def save(self, cert):
        if self.fail_save:
            raise StoreUnavailable("database is down")
        self.saved[cert.id] = cert
        return cert

    def get_by_id(self, certificate_id):
        if self.unavailable:
            return LookupResult.unavailable("database is down")
        cert = self.saved.get(certificate_id)
        if cert is None:
            return LookupResult.not_found()
        return LookupResult.found(cert)

    def list_for_user(self, user_id):
        if self.unavailable:
            raise StoreUnavailable("database is down")
        certs = [c for c in self.saved.values() if c.user_id == user_id]
        return sorted(certs, key=lambda c: c.issued_at, reverse=True)


class FakeIdentityProvider:
    def __init__(self):
        self.accounts = {}
        self.tokens = {}
        self.signed_out = []
        self._next = 0

    def _issue(self, user):
        self._next += 1
        token = f"token-{self._next}"
        self.tokens[token] = user
        return token

    def register(self, username, email, password):
        if not username or not email or not password:
            raise ValueError("All fields are required")
        if email in self.accounts:
            raise AuthenticationError("User already registered")
        user = User(id=f"user-{len(self.accounts) + 1}", username=username, email=email)
        self.accounts[email] = (password, user)
        return AuthResult(user=user, access_token=self._issue(user))

    def login(self, email, password):
        if not email or not password:
            raise ValueError("All fields are required")
        stored = self.accounts.get(email)
        if stored is None or stored[0] != password:
            raise AuthenticationError("Invalid login credentials")
        return AuthResult(user=stored[1], access_token=self._issue(stored[1]))

    def get_user(self, access_token):
        return self.tokens.get(access_token)

    def sign_out(self, access_token):
        self.signed_out.append(access_token)
        self.tokens.pop(access_token, None)
