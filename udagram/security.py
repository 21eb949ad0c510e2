"""
Password hashing and bearer token signing.

Both helpers take their secrets and cost parameters at construction so that
each app (and each test) can build its own instances from settings.
"""

import logging
import time
from typing import Any, Mapping

from jose import jwt
from jose.exceptions import JWTError
from passlib.context import CryptContext
from passlib.exc import PasswordValueError

from .direct import run_blocking
from .errors import InvalidInput, InvalidSignature, MalformedToken

logger = logging.getLogger(__name__)

DEFAULT_BCRYPT_ROUNDS = 10


class CredentialManager:
    """
    Hash and verify passwords with bcrypt.

    Args:
        rounds: bcrypt work factor (log2 of the iteration count)
    """

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS):
        self.rounds = rounds
        self._context = CryptContext(schemes=["bcrypt"], bcrypt__rounds=rounds)

    def hash(self, plaintext: str) -> str:
        """
        Hash a password.

        Raises:
            InvalidInput: bcrypt cannot hash this password (e.g. it contains NUL)
        """
        try:
            return self._context.hash(plaintext)
        except PasswordValueError as exc:
            raise InvalidInput("Password contains unsupported characters", auth=False) from exc

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Check a candidate password; unhashable candidates and unparseable hashes never match."""
        try:
            return self._context.verify(plaintext, hashed)
        except PasswordValueError as exc:
            logger.info("Candidate password rejected by bcrypt: %s", exc)
            return False
        except ValueError as exc:
            logger.warning("Stored password hash could not be parsed: %s", exc)
            return False

    async def hash_async(self, plaintext: str) -> str:
        return await run_blocking(self.hash, plaintext)

    async def verify_async(self, plaintext: str, hashed: str) -> bool:
        return await run_blocking(self.verify, plaintext, hashed)


class TokenIssuer:
    """
    Sign and verify bearer tokens (JWT) with a shared secret.

    Tokens carry the serialized identity plus an issued-at claim; no expiry
    is set, so a token stays valid for as long as the secret does.
    """

    def __init__(self, secret: str, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm

    def issue(self, identity: Mapping[str, Any]) -> str:
        claims = dict(identity)
        claims.setdefault("iat", int(time.time()))
        return jwt.encode(claims, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict[str, Any]:
        """
        Decode a token and return its claims.

        Raises:
            MalformedToken: token is not a compact JWS
            InvalidSignature: signature or claims do not verify
        """
        try:
            jwt.get_unverified_header(token)
        except JWTError as exc:
            raise MalformedToken("Malformed token.") from exc

        try:
            return jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except JWTError as exc:
            raise InvalidSignature("Invalid token signature.") from exc
