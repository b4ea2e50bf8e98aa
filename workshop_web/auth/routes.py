from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from workshop_web.auth.cookies import clear_session_cookie, set_session_cookie
from workshop_web.auth.forms import validate_login_form, validate_profile_form, validate_register_form
from workshop_web.auth.session import AuthSession
from workshop_web.dependencies import get_current_session, get_session
from workshop_web.flash import flash_message
from workshop_web.schemas.user import ProfileUpdateRequest, RegisterRequest
from workshop_web.templating import render

router = APIRouter()

REGISTERED_MESSAGE = "Registration successful! Please login."
RESET_LINK_MESSAGE = "If an account with that email exists, a password reset link has been sent."
INVALID_CREDENTIALS = "Invalid Credentials"


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


@router.get("/login")
async def login_page(request: Request, registered: bool = False, session: AuthSession = Depends(get_session)):
    if session.is_authenticated:
        return _redirect("/dashboard")
    response = render(
        request,
        "login.html",
        form={"email": ""},
        errors={},
        success=REGISTERED_MESSAGE if registered else "",
        show_forgot_password=False,
    )
    if session.expired:
        clear_session_cookie(response)
    return response


@router.post("/login")
async def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    session: AuthSession = Depends(get_session),
):
    errors = validate_login_form(email, password)
    if errors:
        return render(request, "login.html", form={"email": email}, errors=errors, show_forgot_password=False)

    result = await session.login(email.strip(), password)
    if not result.success:
        return render(
            request,
            "login.html",
            form={"email": email},
            errors={},
            error=result.error,
            show_forgot_password=INVALID_CREDENTIALS in (result.error or ""),
        )

    response = _redirect("/dashboard")
    set_session_cookie(response, session.token)
    return response


@router.post("/logout")
async def logout(session: AuthSession = Depends(get_session)):
    await session.logout()
    response = _redirect("/login")
    clear_session_cookie(response)
    return response


@router.get("/register")
async def register_page(request: Request):
    return render(request, "register.html", form={}, errors={})


@router.post("/register")
async def register(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    password: str = Form(""),
    confirm_password: str = Form(""),
    session: AuthSession = Depends(get_session),
):
    form = {"name": name, "email": email, "phone": phone}
    errors = validate_register_form(name, email, phone, password, confirm_password)
    if errors:
        return render(request, "register.html", form=form, errors=errors)

    try:
        payload = RegisterRequest(name=name.strip(), email=email.strip(), phone=phone.strip(), password=password)
    except ValidationError:
        return render(request, "register.html", form=form, errors={}, error="Registration failed")

    result = await session.register(payload)
    if not result.success:
        return render(request, "register.html", form=form, errors={}, error=result.error)
    return _redirect("/login?registered=1")


@router.get("/forgot-password")
async def forgot_password_page(request: Request):
    return render(request, "forgot_password.html", email="")


@router.post("/forgot-password")
async def forgot_password(
    request: Request,
    email: str = Form(""),
    session: AuthSession = Depends(get_session),
):
    result = await session.forgot_password(email.strip())
    if not result.success:
        return render(request, "forgot_password.html", email=email, error=result.error)
    return render(request, "forgot_password.html", email="", success=RESET_LINK_MESSAGE)


@router.get("/profile")
async def profile_page(
    request: Request,
    flash: str | None = None,
    session: AuthSession = Depends(get_current_session),
):
    user = session.user
    return render(
        request,
        "profile.html",
        session,
        form={"name": user.name, "email": user.email, "phone": user.phone or ""},
        success=flash_message(flash),
    )


@router.post("/profile")
async def update_profile(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    password: str = Form(""),
    confirm_password: str = Form(""),
    session: AuthSession = Depends(get_current_session),
):
    form = {"name": name, "email": email, "phone": phone}
    mismatch = validate_profile_form(password, confirm_password)
    if mismatch:
        return render(request, "profile.html", session, form=form, error=mismatch)

    payload = ProfileUpdateRequest(name=name, email=email, phone=phone, password=password or None)
    result = await session.update_profile(payload)
    if not result.success:
        return render(request, "profile.html", session, form=form, error=result.error)

    return _redirect("/profile?flash=profile_updated")
