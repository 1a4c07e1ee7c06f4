"""
Auth API endpoints.

Provides the magic-link sign-in flow, session retrieval and sign-out
under /api/auth.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse

from api.dependencies import get_auth_service
from shared.config import Settings

from .interfaces import IAuthService
from .models import SignInRequest, SignOutRequest
from .exceptions import InvalidOrExpiredTokenError
from .tokens import CALLBACK_PATH, resolve_redirect

router = APIRouter()


def _secure_cookies(settings: Settings) -> bool:
    return settings.auth_url.startswith("https://")


def _set_session_cookie(response, settings: Settings, value: str) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        value,
        max_age=settings.session_max_age,
        path="/",
        httponly=True,
        samesite="lax",
        secure=_secure_cookies(settings),
    )


@router.get("/csrf")
async def get_csrf_token(
    service: IAuthService = Depends(get_auth_service),
) -> JSONResponse:
    """
    Issue a CSRF token.

    The token must be echoed back as ``csrfToken`` on sign-in and sign-out.
    """
    settings = service.settings
    token, cookie_value = service.create_csrf_token()
    response = JSONResponse({"csrfToken": token})
    response.set_cookie(
        settings.csrf_cookie_name,
        cookie_value,
        path="/",
        httponly=True,
        samesite="lax",
        secure=_secure_cookies(settings),
    )
    return response


@router.get("/providers")
async def get_providers(
    service: IAuthService = Depends(get_auth_service),
) -> dict:
    """List the configured sign-in providers (email only)."""
    base_url = service.settings.auth_url.rstrip("/")
    return {
        "email": {
            "id": "email",
            "name": "Email",
            "type": "email",
            "signinUrl": f"{base_url}/api/auth/signin/email",
            "callbackUrl": f"{base_url}{CALLBACK_PATH}",
        }
    }


@router.post("/signin/email")
async def sign_in_with_email(
    body: SignInRequest,
    request: Request,
    service: IAuthService = Depends(get_auth_service),
) -> dict:
    """
    Request a magic link.

    Returns the URL of the "check your email" page. A relay failure is
    returned as 502 so the caller can ask for a new link.
    """
    settings = service.settings
    service.verify_csrf_token(request.cookies.get(settings.csrf_cookie_name), body.csrf_token)
    url = await service.request_sign_in(body.email, body.callback_url)
    return {"url": url}


@router.get("/callback/email")
async def email_callback(
    token: str = Query(..., min_length=1),
    email: str = Query(..., min_length=1),
    callback_url: Optional[str] = Query(default=None, alias="callbackUrl"),
    service: IAuthService = Depends(get_auth_service),
) -> RedirectResponse:
    """
    Redeem a magic link.

    On success sets the session cookie and redirects to the callback URL;
    otherwise redirects to the error page with ``error=Verification``.
    """
    settings = service.settings
    base_url = settings.auth_url.rstrip("/")

    try:
        result = await service.complete_sign_in(email, token)
    except InvalidOrExpiredTokenError:
        return RedirectResponse(f"{base_url}{settings.error_page}?error=Verification", status_code=302)

    response = RedirectResponse(resolve_redirect(callback_url, base_url), status_code=302)
    _set_session_cookie(response, settings, result.session_token)
    return response


@router.get("/session")
async def get_session(
    request: Request,
    service: IAuthService = Depends(get_auth_service),
) -> dict:
    """
    Get the current session.

    Returns an empty object when there is no valid session.
    """
    session = await service.get_session(request.cookies.get(service.settings.session_cookie_name))
    if session is None:
        return {}
    return session.model_dump(mode="json")


@router.post("/signout")
async def sign_out(
    body: SignOutRequest,
    request: Request,
    service: IAuthService = Depends(get_auth_service),
) -> JSONResponse:
    """End the current session and clear the cookie."""
    settings = service.settings
    service.verify_csrf_token(request.cookies.get(settings.csrf_cookie_name), body.csrf_token)

    await service.sign_out(request.cookies.get(settings.session_cookie_name))

    response = JSONResponse({"url": settings.auth_url})
    response.delete_cookie(settings.session_cookie_name, path="/")
    return response
