import json
import time
from pathlib import Path
from typing import Any, Dict, Optional

import jwt
from jwcrypto import jwk
from fastapi_users.authentication.strategy.jwt import JWTStrategy
from fastapi_users import exceptions, models

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


def load_signing_key(key_file: Optional[str]) -> jwk.JWK:
    """Load the RSA signing key, creating it on first use.

    Without a key file the key lives only in memory, so tokens do not survive
    a restart.
    """
    if not key_file:
        logger.warning("JWT_KEY_FILE not set; using an ephemeral signing key")
        return jwk.JWK.generate(kty="RSA", size=2048)

    path = Path(key_file)
    if path.exists():
        return jwk.JWK.from_pem(path.read_bytes())

    key = jwk.JWK.generate(kty="RSA", size=2048)
    path.write_bytes(key.export_to_pem(private_key=True, password=None))
    logger.info(f"Generated new JWT signing key at {path}")
    return key


class RS256JWTStrategyWithKid(JWTStrategy[models.UP, models.ID]):
    """
    JWT strategy that signs with RS256, sets a kid header and publishes a JWKS
    """

    def __init__(
        self,
        lifetime_seconds: int,
        key_id: str = "v1",
        key_file: Optional[str] = None,
    ):
        self.key_id = key_id
        self.rsa_key = load_signing_key(key_file)

        private_pem = self.rsa_key.export_to_pem(private_key=True, password=None)
        public_pem = self.rsa_key.export_to_pem(private_key=False, password=None)

        super().__init__(
            secret=private_pem,
            lifetime_seconds=lifetime_seconds,
            token_audience=[settings.jwt.application_id],
            algorithm="RS256",
            public_key=public_pem,
        )

        self.public_jwk = json.loads(self.rsa_key.export_public())
        self.public_jwk["kid"] = self.key_id

    async def write_token(self, user: models.UP) -> str:
        now = int(time.time())
        data: Dict[str, Any] = {
            "sub": f"user:{user.id}",
            "user_id": str(user.id),
            "email": str(user.email),
            "aud": self.token_audience,
            "iss": settings.jwt.issuer,
            "iat": now,
        }
        if self.lifetime_seconds:
            data["exp"] = now + self.lifetime_seconds

        return jwt.encode(
            data,
            self.encode_key,
            algorithm=self.algorithm,
            headers={"kid": self.key_id},
        )

    async def read_token(
        self, token: Optional[str], user_manager
    ) -> Optional[models.UP]:
        """Resolve a token to an active user, or None for anything invalid."""
        if token is None:
            return None

        try:
            payload = jwt.decode(
                token,
                self.decode_key,
                algorithms=[self.algorithm],
                audience=self.token_audience,
                issuer=settings.jwt.issuer,
            )
        except jwt.PyJWTError:
            return None

        user_id = payload.get("user_id")
        if user_id is None:
            return None

        try:
            parsed_user_id = user_manager.parse_id(user_id)
            return await user_manager.get(parsed_user_id)
        except (exceptions.UserNotExists, exceptions.InvalidID):
            return None

    def get_jwks(self) -> Dict[str, Any]:
        """Get JWKS for public key distribution"""
        return {"keys": [self.public_jwk]}
