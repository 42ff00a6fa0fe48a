# blog_server/api/deps.py

from typing import Optional

import structlog
from fastapi import Header, HTTPException, Request, status

from blog_server.core.security import (
    InvalidToken,
    Principal,
    TokenCodec,
    Unauthenticated,
)


logger = structlog.get_logger(__name__)


def extract_bearer(authorization: Optional[str]) -> Optional[str]:
    """Returns the token from "Bearer <token>", or None when there is none."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def resolve_principal(authorization: Optional[str], codec: TokenCodec) -> Principal:
    """
    Authorization header -> Principal.
    Raises Unauthenticated when no token is presented and InvalidToken when
    the token fails verification.
    """
    token = extract_bearer(authorization)
    if token is None:
        raise Unauthenticated("no bearer token")
    return Principal.from_claims(codec.decode(token))


# -------------------------------
# FastAPI dependencies
# -------------------------------

def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> Principal:
    try:
        return resolve_principal(authorization, get_token_codec(request))
    except Unauthenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except InvalidToken as e:
        logger.info("token_rejected", reason=e.status.value, path=request.url.path)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_post_owner(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> Optional[Principal]:
    """
    Gate for /post/{blogid}. Those routes are open to anyone unless
    PROTECT_POST_ROUTES is set, in which case the caller must own the post.
    """
    if not request.app.state.settings.protect_post_routes:
        return None
    return get_current_user(request, authorization)
