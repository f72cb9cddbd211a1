# server/api/skill.py

import logging
from datetime import date
from pydantic import BaseModel, Field, ValidationError, field_validator
from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
from api.auth import get_current_user
from api.views import templates
from core import skills as skill_repository
from database import get_db


logger = logging.getLogger(__name__)

router = APIRouter()

FIELD_MESSAGES = {
    "description": "Enter at least 5 characters",
    "target_date": "Enter a valid date",
    "id": "Unknown skill id",
}


class SkillForm(BaseModel):
    """
    Shape shared by the skill form on display and on submit.
    The owner is never part of it; it always comes from the session.
    """
    id: int = Field(default=0, ge=0, le=skill_repository.MAX_ID)
    description: str = Field(min_length=5)
    target_date: date | None = None
    done: bool = False

    @field_validator("target_date", mode="before")
    @classmethod
    def blank_date_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


def default_target_date(today: date | None = None) -> date:
    today = today or date.today()
    try:
        return today.replace(year=today.year + 1)
    except ValueError:
        # Feb 29 has no counterpart next year
        return today.replace(year=today.year + 1, day=28)


def validation_messages(exc: ValidationError) -> dict[str, str]:
    errors = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "__root__"
        errors.setdefault(field, FIELD_MESSAGES.get(field, error["msg"]))
    return errors


def render_skill_form(request: Request, action: str, skill, name: str, errors: dict | None = None):
    return templates.TemplateResponse(
        request,
        "skill.html",
        {"skill": skill, "action": action, "name": name, "errors": errors or {}},
    )


def _submit_skill(request: Request, db: Session, current_user: str, action: str, submitted: dict):
    try:
        form = SkillForm.model_validate(submitted)
    except ValidationError as exc:
        return render_skill_form(request, action, submitted, current_user, validation_messages(exc))

    skill = skill_repository.save(
        db,
        owner=current_user,
        description=form.description,
        target_date=form.target_date,
        done=form.done,
        skill_id=form.id,
    )
    logger.info("Skill %s saved by %s via %s", skill.id, current_user, action)

    # Always redirect after a write; reloading the list must not resubmit
    return RedirectResponse(url="/list-skills", status_code=status.HTTP_303_SEE_OTHER)


# -------------------------------
# Read
# -------------------------------

@router.get("/list-skills")
def list_all_skills(
    request: Request,
    current_user: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    skills = skill_repository.find_by_owner(db, current_user)
    return templates.TemplateResponse(
        request, "list_skills.html", {"skills": skills, "name": current_user}
    )


# -------------------------------
# Create
# -------------------------------

@router.get("/add-skill")
def show_new_skill_page(request: Request, current_user: str = Depends(get_current_user)):
    skill = {
        "id": 0,
        "owner": current_user,
        "description": "",
        "target_date": default_target_date(),
        "done": False,
    }
    return render_skill_form(request, "add-skill", skill, current_user)


@router.post("/add-skill")
def add_new_skill(
    request: Request,
    description: str = Form(""),
    target_date: str = Form(""),
    done: bool = Form(False),
    current_user: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    submitted = {
        "id": 0,
        "description": description,
        "target_date": target_date,
        "done": done,
    }
    return _submit_skill(request, db, current_user, "add-skill", submitted)


# -------------------------------
# Update
# -------------------------------

@router.get("/update-skill")
def show_update_skill_page(
    request: Request,
    id: int,
    current_user: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    skill = skill_repository.find_by_id(db, id)
    if skill is None:
        logger.info("User %s requested missing skill %s", current_user, id)
        raise HTTPException(status_code=404, detail="Skill not found")
    return render_skill_form(request, "update-skill", skill, current_user)


@router.post("/update-skill")
def update_skill(
    request: Request,
    id: int = Form(0),
    description: str = Form(""),
    target_date: str = Form(""),
    done: bool = Form(False),
    current_user: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    submitted = {
        "id": id,
        "description": description,
        "target_date": target_date,
        "done": done,
    }
    return _submit_skill(request, db, current_user, "update-skill", submitted)


# -------------------------------
# Delete
# -------------------------------

@router.get("/delete-skill")
def delete_skill(
    id: int,
    current_user: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if skill_repository.delete_by_id(db, id, requested_by=current_user):
        logger.info("Skill %s deleted by %s", id, current_user)
    return RedirectResponse(url="/list-skills", status_code=status.HTTP_303_SEE_OTHER)
