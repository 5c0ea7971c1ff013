from __future__ import annotations

from typing import Callable, Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.state import AppSession, SessionRegistry
from certify.models import Quiz
from certify.quiz.generate import generate_quiz
from certify.store.certificates import CertificateRepository
from certify.store.identity import IdentityProvider

bearer = HTTPBearer(auto_error=False)

# Process-wide singletons (same cached pattern as the model loaders)
_registry: Optional[SessionRegistry] = None
_identity: Optional[IdentityProvider] = None
_certificates: Optional[CertificateRepository] = None


def get_registry() -> SessionRegistry:
    global _registry
    if _registry is None:
        _registry = SessionRegistry()
    return _registry


def get_identity() -> IdentityProvider:
    global _identity
    if _identity is None:
        _identity = IdentityProvider()
    return _identity


def get_certificate_repository() -> CertificateRepository:
    global _certificates
    if _certificates is None:
        _certificates = CertificateRepository()
    return _certificates


def get_quiz_generator() -> Callable[[str], Quiz]:
    return generate_quiz


def get_access_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> str:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Not signed in.")
    return credentials.credentials


def get_current_session(
    token: str = Depends(get_access_token),
    registry: SessionRegistry = Depends(get_registry),
    identity: IdentityProvider = Depends(get_identity),
) -> AppSession:
    session = registry.restore(token, identity)
    if session is None:
        raise HTTPException(status_code=401, detail="Session expired. Please sign in again.")
    return session
