# server/api/auth.py

import os
import logging
from dotenv import load_dotenv
from jose import JWTError, jwt
from pydantic import BaseModel
from fastapi import APIRouter, HTTPException, Request, status, Depends, Form
from fastapi.responses import RedirectResponse
from fastapi.security import OAuth2PasswordRequestForm, OAuth2PasswordBearer
from datetime import datetime, timedelta, timezone
from urllib.parse import urlencode
from api.views import templates
from core.users import user_store


load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_JWT_SECRET_KEY = "dev-jwt-secret-change-me"

SECRET_KEY = os.getenv("JWT_SECRET_KEY") or DEFAULT_JWT_SECRET_KEY
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60

SESSION_USER_KEY = "username"


router = APIRouter()


class NotAuthenticated(Exception):
    """Raised when a request carries neither a session nor a bearer token."""


class Token(BaseModel):
    access_token: str
    token_type: str


class User(BaseModel):
    username: str
    roles: list[str]


def safe_next(target: str | None) -> str:
    """
    Returns a local path to land on after login.
    Anything absolute, protocol-relative or pointing back at the login page
    falls back to the welcome page.
    """
    if not target or not target.startswith("/") or target.startswith(("//", "/\\")):
        return "/"
    if target == "/login" or target.startswith(("/login?", "/logout")):
        return "/"
    return target


def login_url(flag: str | None = None, next_path: str | None = None) -> str:
    parts = [flag] if flag else []
    next_path = safe_next(next_path)
    if next_path != "/":
        parts.append(urlencode({"next": next_path}))
    return "/login" + ("?" + "&".join(parts) if parts else "")


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=15))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


# -------------------------------
# Form Login
# -------------------------------

@router.get("/login")
def login_page(
    request: Request,
    error: str | None = None,
    logout: str | None = None,
    next: str | None = None,
):
    message = None
    if error is not None:
        message = "Invalid username or password"
    elif logout is not None:
        message = "You have been logged out"
    return templates.TemplateResponse(
        request, "login.html", {"error": error is not None, "message": message, "next": safe_next(next)}
    )


@router.post("/login")
def login_submit(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    next: str = Form("/"),
):
    user = user_store.authenticate(username, password)
    if not user:
        logger.info("Failed login for %r", username)
        return RedirectResponse(url=login_url("error", next), status_code=status.HTTP_303_SEE_OTHER)

    request.session.clear()
    request.session[SESSION_USER_KEY] = user.username
    logger.info("User %s logged in", user.username)
    return RedirectResponse(url=safe_next(next), status_code=status.HTTP_303_SEE_OTHER)


@router.get("/logout")
def logout(request: Request):
    username = request.session.get(SESSION_USER_KEY)
    request.session.clear()
    if username:
        logger.info("User %s logged out", username)
    return RedirectResponse(url="/login?logout", status_code=status.HTTP_303_SEE_OTHER)


# -------------------------------
# Bearer Tokens
# -------------------------------

@router.post("/token", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends()):
    user = user_store.authenticate(form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token = create_access_token(
        data={"sub": user.username},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    return {"access_token": access_token, "token_type": "bearer"}


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token", auto_error=False)


def get_current_user(request: Request, token: str | None = Depends(oauth2_scheme)) -> str:
    """
    Resolves the caller's username from the session, falling back to a
    bearer token. Requests with neither never reach the handlers.
    """
    username = request.session.get(SESSION_USER_KEY)
    if username and username in user_store:
        return username

    if token is None:
        raise NotAuthenticated()

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise credentials_exception
    username = payload.get("sub")
    if username is None or username not in user_store:
        raise credentials_exception
    return username


@router.get("/users/me", response_model=User)
def read_users_me(current_user: str = Depends(get_current_user)):
    user = user_store.get(current_user)
    return {"username": user.username, "roles": list(user.roles)}
