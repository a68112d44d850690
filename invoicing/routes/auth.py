"""
Auth API endpoints.

- POST /auth/login - Sign in with email + password (form post)

Rejected credentials come back as 401 with the CredentialsSignin code so
the login form can show its message. Any other sign-in failure is logged
and turned into a generic 500.
"""

import logging

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from invoicing.config import settings
from invoicing.db.client import get_auth_client
from invoicing.schemas.auth import LoginFailedResponse
from invoicing.services.auth_service import authenticate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    status_code=status.HTTP_303_SEE_OTHER,
    responses={401: {"model": LoginFailedResponse}},
    summary="Sign in with credentials",
    description="""
    Forward the login form to Supabase Auth.

    - 303 to the dashboard with an `access_token` cookie on success
    - 401 with error=CredentialsSignin when the credentials are rejected
    - 500 for any other identity provider failure
    """
)
async def login(request: Request) -> Response:
    form_data = await request.form()
    supabase_client = get_auth_client()

    try:
        code = await authenticate(supabase_client, None, form_data)
    except Exception as e:
        logger.error(f"Unexpected sign-in failure: {type(e).__name__}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "auth_error", "details": "Something went wrong"}
        )

    if code is not None:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=LoginFailedResponse(
                error=code,
                details="Invalid credentials"
            ).model_dump()
        )

    session = supabase_client.auth.get_session()

    response = RedirectResponse(
        url=settings.LOGIN_REDIRECT_PATH,
        status_code=status.HTTP_303_SEE_OTHER
    )
    if session is not None:
        response.set_cookie(
            key="access_token",
            value=f"Bearer {session.access_token}",
            httponly=True,
            max_age=session.expires_in,
            samesite="lax",
            secure=settings.is_production(),
        )
    return response
