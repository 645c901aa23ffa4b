from fastapi import Request, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.domains.auth.jwt_service import JWTService


class JWTAuthMiddleware(HTTPBearer):
    """Resolves the bearer token to the caller's user id."""

    def __init__(self, jwt_service: JWTService = None):
        super(JWTAuthMiddleware, self).__init__(auto_error=False)
        self.jwt_service = jwt_service or JWTService()

    async def __call__(self, request: Request) -> str:
        credentials: HTTPAuthorizationCredentials = await super(JWTAuthMiddleware, self).__call__(request)

        if not credentials:
            raise HTTPException(status_code=403, detail="Invalid authorization code.")

        user_id = self.jwt_service.verify_token(credentials.credentials)
        if not user_id:
            raise HTTPException(status_code=401, detail="Invalid token or expired token.")

        return user_id
