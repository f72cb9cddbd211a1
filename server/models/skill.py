# server/models/skill.py

from sqlalchemy import Column, Integer, String, Date, Boolean
from . import Base


# -------------------------------
# Skill Model
# -------------------------------

class Skill(Base):
    """
    A single skill-improvement goal.
    Owned by the username that created or last saved it.
    """
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    owner = Column(String, index=True, nullable=False)
    description = Column(String, nullable=False)
    target_date = Column(Date)
    done = Column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return (
            f"Skill(id={self.id!r}, owner={self.owner!r}, description={self.description!r}, "
            f"target_date={self.target_date!r}, done={self.done!r})"
        )
