from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from supabase import Client

from app.core.logging import get_logger
from app.core.settings import settings
from certify.models import Certificate
from certify.store.results import LookupResult, StoreUnavailable
from certify.store.supabase_client import get_supabase_client

log = get_logger(__name__)

# Unanswered questions are stored as -1 in the user_answers array
NO_ANSWER = -1


def certificate_to_row(cert: Certificate) -> Dict[str, Any]:
    return {
        "id": cert.id,
        "user_id": cert.user_id,
        "user_name": cert.user_name,
        "video_url": cert.video_url,
        "topic": cert.topic,
        "channel_name": cert.channel_name,
        "questions": (
            [q.model_dump(by_alias=True) for q in cert.questions]
            if cert.questions is not None
            else None
        ),
        "user_answers": (
            [NO_ANSWER if a is None else a for a in cert.user_answers]
            if cert.user_answers is not None
            else None
        ),
        "score": cert.score,
        "issued_at": cert.issued_at.isoformat(),
    }


def row_to_certificate(row: Dict[str, Any]) -> Certificate:
    answers = row.get("user_answers")
    if answers is not None:
        answers = [None if a is None or a < 0 else a for a in answers]

    return Certificate(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        user_name=row.get("user_name") or "",
        video_url=row.get("video_url") or "",
        topic=row.get("topic") or "",
        channel_name=row.get("channel_name"),
        questions=row.get("questions"),
        user_answers=answers,
        score=int(row["score"]),
        issued_at=row["issued_at"],
    )


def parse_row(row: Dict[str, Any]) -> Optional[Certificate]:
    """row_to_certificate, or None (logged) for a row that is not a valid certificate."""
    try:
        return row_to_certificate(row)
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        # pydantic ValidationError is a ValueError
        row_id = row.get("id") if isinstance(row, dict) else None
        log.warning("Skipping unreadable certificate row %s: %s", row_id, e)
        return None


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


class CertificateRepository:
    """Certificate records in the hosted Supabase table."""

    def __init__(self, client: Optional[Client] = None, table: Optional[str] = None):
        self._client = client
        self.table = table or settings.certificates_table

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase_client()
        return self._client

    def save(self, cert: Certificate) -> Certificate:
        try:
            self.client.table(self.table).insert(certificate_to_row(cert)).execute()
        except Exception as e:
            raise StoreUnavailable(f"Could not save certificate {cert.id}") from e
        log.info("Saved certificate %s for user %s", cert.id, cert.user_id)
        return cert

    def get_by_id(self, certificate_id: str) -> LookupResult[Certificate]:
        # Ids are always UUIDs; anything else cannot match and must not
        # reach a uuid column as a malformed value
        if not _is_uuid(certificate_id):
            return LookupResult.not_found()

        try:
            res = (
                self.client.table(self.table)
                .select("*")
                .eq("id", certificate_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            log.warning("Certificate lookup failed for %s: %s", certificate_id, e)
            return LookupResult.unavailable(str(e))

        rows = res.data or []
        cert = parse_row(rows[0]) if rows else None
        # An unreadable record cannot vouch for anyone
        if cert is None:
            return LookupResult.not_found()
        return LookupResult.found(cert)

    def list_for_user(self, user_id: str) -> List[Certificate]:
        try:
            res = (
                self.client.table(self.table)
                .select("*")
                .eq("user_id", user_id)
                .order("issued_at", desc=True)
                .execute()
            )
        except Exception as e:
            raise StoreUnavailable(f"Could not load certificates for user {user_id}") from e
        certs = (parse_row(r) for r in (res.data or []))
        return [c for c in certs if c is not None]
