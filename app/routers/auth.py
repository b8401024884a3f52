from fastapi import APIRouter, Form, HTTPException, status
from fastapi.responses import RedirectResponse
from app.auth.session_gate import LOGIN_PATH, LANDING_PATH, set_auth_cookie, clear_auth_cookie
import logging

router = APIRouter(tags=["Auth"])
logger = logging.getLogger(__name__)


@router.get("/")
async def root():
    return RedirectResponse(url=LANDING_PATH, status_code=status.HTTP_303_SEE_OTHER)


@router.get(LOGIN_PATH)
async def login_page():
    return {"message": "Sign in to the places dashboard", "action": LOGIN_PATH, "fields": ["email", "password"]}


@router.post(LOGIN_PATH)
async def login(email: str = Form(""), password: str = Form("")):
    # Placeholder: any non-empty pair is accepted, nothing is verified.
    if not email.strip() or not password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email and password are required")
    logger.info("Dashboard login for %s (unverified)", email)
    response = RedirectResponse(url=LANDING_PATH, status_code=status.HTTP_303_SEE_OTHER)
    set_auth_cookie(response)
    return response


@router.post("/logout")
async def logout():
    response = RedirectResponse(url=LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)
    clear_auth_cookie(response)
    return response
