from datetime import datetime, timedelta, timezone

import jwt

from expense_tracker.schemas.auth import UserPrincipal
from expense_tracker.services.providers.protocols.token_provider import ITokenProvider
from expense_tracker.settings.app import AppSettings


class JwtTokenProvider(ITokenProvider):
    algorithm = "HS256"

    def __init__(self, settings: AppSettings) -> None:
        self.secret_key: str = settings.jwt_secret.get_secret_value()
        self.ttl = timedelta(minutes=settings.token_ttl_minutes)

    def encode_token(self, user_principal: UserPrincipal) -> str:
        payload = user_principal.model_dump(mode="json", include={"user_id"})
        payload["exp"] = datetime.now(tz=timezone.utc) + self.ttl
        return jwt.encode(payload, key=self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> UserPrincipal:
        decoded = jwt.decode(token, key=self.secret_key, algorithms=[self.algorithm])
        return UserPrincipal.model_validate(decoded)
