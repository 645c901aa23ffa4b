import jwt
from datetime import datetime, timedelta, timezone
from typing import Optional
from app.config.setting import settings


class JWTService:
    def __init__(self, secret_key: Optional[str] = None, algorithm: Optional[str] = None,
                 expire_minutes: Optional[int] = None):
        self.secret_key = secret_key or settings.jwt_secret_key
        self.algorithm = algorithm or settings.jwt_algorithm
        self.access_token_expire_minutes = (
            expire_minutes if expire_minutes is not None else settings.access_token_expire_minutes
        )

    def create_access_token(self, user_id: str) -> str:
        """Create a new JWT access token."""
        expire = datetime.now(timezone.utc) + timedelta(minutes=self.access_token_expire_minutes)
        to_encode = {
            "sub": user_id,
            "exp": expire
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Optional[str]:
        """Verify a JWT token and return the user id if valid."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            return None
        except jwt.InvalidTokenError:
            return None
        return payload.get("sub")
