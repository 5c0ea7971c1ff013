from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import (
    get_access_token,
    get_current_session,
    get_identity,
    get_registry,
)
from app.api.schemas import AuthResponse, LoginRequest, RegisterRequest, UserOut
from app.core.logging import get_logger
from app.core.state import AppSession, SessionRegistry
from certify.store.identity import AuthenticationError, AuthResult, IdentityProvider

router = APIRouter(prefix="/auth", tags=["auth"])
log = get_logger(__name__)


def _open_session(result: AuthResult, registry: SessionRegistry) -> AuthResponse:
    if result.access_token:
        registry.open(result.access_token, result.user)
    return AuthResponse(
        user=UserOut.from_user(result.user),
        access_token=result.access_token,
        pending_verification=result.pending_verification,
    )


@router.post("/register", response_model=AuthResponse)
def register(
    req: RegisterRequest,
    identity: IdentityProvider = Depends(get_identity),
    registry: SessionRegistry = Depends(get_registry),
):
    try:
        result = identity.register(req.username.strip(), req.email.strip(), req.password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AuthenticationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        log.exception("Internal error in /auth/register")
        raise HTTPException(status_code=503, detail="Authentication service unavailable.")

    return _open_session(result, registry)


@router.post("/login", response_model=AuthResponse)
def login(
    req: LoginRequest,
    identity: IdentityProvider = Depends(get_identity),
    registry: SessionRegistry = Depends(get_registry),
):
    try:
        result = identity.login(req.email.strip(), req.password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except Exception:
        log.exception("Internal error in /auth/login")
        raise HTTPException(status_code=503, detail="Authentication service unavailable.")

    return _open_session(result, registry)


@router.get("/session", response_model=UserOut)
def current_session(session: AppSession = Depends(get_current_session)):
    return UserOut.from_user(session.current_user)


@router.post("/logout")
def logout(
    token: str = Depends(get_access_token),
    identity: IdentityProvider = Depends(get_identity),
    registry: SessionRegistry = Depends(get_registry),
):
    registry.close(token)
    identity.sign_out(token)
    return {"status": "signed_out"}
