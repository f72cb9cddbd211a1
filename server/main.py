# server/main.py

import os
import logging
from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.responses import RedirectResponse
from starlette.middleware.sessions import SessionMiddleware
from api import auth, skill, welcome
from database import init_db


load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

DEFAULT_SESSION_SECRET_KEY = "dev-session-secret-change-me"

SESSION_SECRET_KEY = os.getenv("SESSION_SECRET_KEY") or DEFAULT_SESSION_SECRET_KEY

if SESSION_SECRET_KEY == DEFAULT_SESSION_SECRET_KEY:
    logger.warning("SESSION_SECRET_KEY not set; using the development default")
if auth.SECRET_KEY == auth.DEFAULT_JWT_SECRET_KEY:
    logger.warning("JWT_SECRET_KEY not set; using the development default")


init_db()

app = FastAPI(title="My Skills List")

app.add_middleware(SessionMiddleware, secret_key=SESSION_SECRET_KEY)


@app.exception_handler(auth.NotAuthenticated)
def redirect_to_login(request: Request, exc: auth.NotAuthenticated):
    requested = request.url.path
    if request.url.query:
        requested += "?" + request.url.query
    return RedirectResponse(url=auth.login_url(next_path=requested), status_code=status.HTTP_303_SEE_OTHER)


app.include_router(auth.router)
app.include_router(welcome.router)
app.include_router(skill.router)
