"""Access Tokens — HS256 JWT sign/verify for admins and investigators.

Invariants:
    - Claims: sub, company_id, role, iat, exp
    - decode_access_token raises AuthenticationError, never a jwt exception
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from trialengage.core.domain_types import Role
from trialengage.core.errors import AuthenticationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """Authenticated caller decoded from a bearer token."""
    subject: str
    company_id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class TokenCodec:
    def __init__(self, secret: str, algorithm: str = "HS256", expires_minutes: int = 1440):
        self.secret = secret
        self.algorithm = algorithm
        self.expires_minutes = expires_minutes

    def encode(self, subject: str, company_id: str, role: Role) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": subject,
            "company_id": company_id,
            "role": role.value,
            "iat": now,
            "exp": now + timedelta(minutes=self.expires_minutes),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Principal:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token expired. Please log in again.")
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid token: {e}")
            raise AuthenticationError("Invalid or expired token")

        subject = payload.get("sub")
        company_id = payload.get("company_id")
        try:
            role = Role(payload.get("role"))
        except ValueError:
            raise AuthenticationError("Invalid token: unknown role")
        if not subject or not company_id:
            raise AuthenticationError("Invalid token: missing claims")
        return Principal(subject=subject, company_id=company_id, role=role)
