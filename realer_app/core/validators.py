import uuid
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException, Request
from jose import ExpiredSignatureError, JWTError, jwt

from .settings import settings


def create_access_token(user_id: uuid.UUID, expires_minutes: int | None = None) -> str:
    exp = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.ACCESS_EXPIRE_MINUTES
    )
    return jwt.encode(
        {"sub": str(user_id), "type": "access", "exp": exp},
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )


def decode_access_token(token: str) -> uuid.UUID:
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
    except ExpiredSignatureError:
        raise ValueError("JWT expired")
    except JWTError:
        raise ValueError("Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        raise ValueError("Token missing user ID")

    try:
        return uuid.UUID(user_id)
    except ValueError:
        raise ValueError("Invalid token")


def token_from_request(request: Request) -> str | None:
    token = request.cookies.get("access_token")
    if token:
        return token
    auth = request.headers.get("Authorization", "")
    if auth.lower().startswith("bearer "):
        return auth[7:].strip() or None
    return None


async def jwt_protect(request: Request) -> uuid.UUID:
    token = token_from_request(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        return decode_access_token(token)
    except ValueError as e:
        raise HTTPException(status_code=401, detail=str(e))
