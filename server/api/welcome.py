# server/api/welcome.py

from fastapi import APIRouter, Depends, Request
from api.auth import get_current_user
from api.views import templates


router = APIRouter()


@router.get("/")
def welcome(request: Request, current_user: str = Depends(get_current_user)):
    return templates.TemplateResponse(request, "welcome.html", {"name": current_user})
