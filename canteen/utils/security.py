# canteen/utils/security.py
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from passlib.context import CryptContext

JWT_ALGO = "HS256"


class PasswordHasher:
    """bcrypt przez passlib, koszt z BCRYPT_SALT_ROUNDS."""

    def __init__(self, rounds: int = 10):
        self.context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self.context.hash(password)

    def verify(self, password: str, hashed: str | None) -> bool:
        if not hashed:
            return False
        return self.context.verify(password, hashed)


class TokenCodec:
    def __init__(self, secret: str):
        self.secret = secret

    def encode(self, payload: Dict[str, Any], expires_in: timedelta) -> str:
        exp = datetime.now(timezone.utc) + expires_in
        return jwt.encode({**payload, "exp": exp}, self.secret, algorithm=JWT_ALGO)

    def decode(self, token: str) -> Dict[str, Any]:
        # ExpiredSignatureError dziedziczy po InvalidTokenError
        return jwt.decode(token, self.secret, algorithms=[JWT_ALGO])
