"""
Authentication Dependencies

Resolves the calling author from a Supabase access token. Sign-up and
sign-in happen in the browser against Supabase Auth directly.
"""

from typing import Optional

from fastapi import HTTPException, Header

from scribe.config import config
from scribe.database.client import get_supabase_admin_client, SupabaseClientError

DEV_USER_ID = "dev-user-id"


def _bearer_token(authorization: str) -> str:
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token or " " in token:
        raise HTTPException(
            status_code=401,
            detail="Expected 'Authorization: Bearer <token>'"
        )
    return token


async def get_current_user_id(
    authorization: Optional[str] = Header(None, alias="Authorization")
) -> str:
    """
    The author's user id, verified against Supabase Auth.

    In dev mode a request without the header runs as the dev user.
    """
    if not authorization:
        if config.DEV_MODE:
            return DEV_USER_ID
        raise HTTPException(status_code=401, detail="Sign in to continue")

    token = _bearer_token(authorization)

    try:
        user_response = get_supabase_admin_client().auth.get_user(token)
    except SupabaseClientError as e:
        raise HTTPException(status_code=503, detail=f"Authentication unavailable: {e}")
    except Exception as e:
        raise HTTPException(status_code=401, detail=f"Could not verify session: {e}")

    user = getattr(user_response, "user", None)
    if user is None:
        raise HTTPException(status_code=401, detail="Session expired, sign in again")

    return str(user.id)
