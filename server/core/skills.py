# server/core/skills.py

import logging
from datetime import date
from sqlalchemy.orm import Session
from models.skill import Skill


logger = logging.getLogger(__name__)

# Signed 64-bit INTEGER column range
MIN_ID = -(2 ** 63)
MAX_ID = 2 ** 63 - 1


def id_in_range(skill_id: int) -> bool:
    return MIN_ID <= skill_id <= MAX_ID


def find_by_owner(db: Session, owner: str) -> list[Skill]:
    return (
        db.query(Skill)
        .filter(Skill.owner == owner)
        .order_by(Skill.id.asc())
        .all()
    )


def find_by_id(db: Session, skill_id: int) -> Skill | None:
    if not id_in_range(skill_id):
        return None
    return db.get(Skill, skill_id)


def save(
    db: Session,
    *,
    owner: str,
    description: str,
    target_date: date | None,
    done: bool = False,
    skill_id: int = 0,
) -> Skill:
    """
    Insert-or-update keyed on id.
    An id of 0 inserts a new row with a store-assigned id; any other id
    overwrites every column of that row, or inserts it if it is missing.
    """
    if skill_id:
        existing = db.get(Skill, skill_id)
        if existing is not None and existing.owner != owner:
            logger.warning(
                "Skill %s owned by %s is being overwritten by %s", skill_id, existing.owner, owner
            )
        skill = db.merge(Skill(
            id=skill_id,
            owner=owner,
            description=description,
            target_date=target_date,
            done=done,
        ))
    else:
        skill = Skill(owner=owner, description=description, target_date=target_date, done=done)
        db.add(skill)

    db.commit()
    db.refresh(skill)
    return skill


def delete_by_id(db: Session, skill_id: int, requested_by: str | None = None) -> bool:
    skill = find_by_id(db, skill_id)
    if skill is None:
        logger.info("Delete of missing skill %s ignored", skill_id)
        return False

    if requested_by is not None and skill.owner != requested_by:
        logger.warning("Skill %s owned by %s deleted by %s", skill_id, skill.owner, requested_by)

    db.delete(skill)
    db.commit()
    return True
