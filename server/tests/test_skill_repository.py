from datetime import date

from core import skills
from models.skill import Skill


def _add(db, owner, description, target_date=date(2030, 1, 1), done=False):
    return skills.save(db, owner=owner, description=description, target_date=target_date, done=done)


def test_save_without_id_inserts_with_store_assigned_id(db):
    first = _add(db, "Lia", "Learn Go")
    second = _add(db, "Lia", "Learn Rust")

    assert first.id > 0
    assert second.id > first.id
    assert db.query(Skill).count() == 2


def test_find_by_owner_only_returns_that_owner_in_id_order(db):
    a = _add(db, "Lia", "Learn Go")
    _add(db, "Leo", "Learn Java")
    b = _add(db, "Lia", "Learn Rust")

    found = skills.find_by_owner(db, "Lia")

    assert [s.id for s in found] == [a.id, b.id]
    assert all(s.owner == "Lia" for s in found)
    assert skills.find_by_owner(db, "Nobody") == []


def test_save_with_existing_id_overwrites_every_field(db):
    original = _add(db, "Lia", "Learn Go", date(2030, 1, 1), False)

    updated = skills.save(
        db,
        owner="Lia",
        description="Learn Go generics",
        target_date=date(2031, 6, 30),
        done=True,
        skill_id=original.id,
    )

    assert updated.id == original.id
    assert db.query(Skill).count() == 1
    row = skills.find_by_id(db, original.id)
    assert row.description == "Learn Go generics"
    assert row.target_date == date(2031, 6, 30)
    assert row.done is True


def test_save_with_unknown_id_inserts_a_row(db):
    created = skills.save(
        db, owner="Lia", description="Learn Elixir", target_date=date(2030, 1, 1), skill_id=42
    )

    assert created.id == 42
    assert skills.find_by_id(db, 42).description == "Learn Elixir"


def test_save_forces_the_given_owner_over_the_stored_one(db):
    original = _add(db, "Lia", "Learn Go")

    skills.save(db, owner="Leo", description="Learn Go", target_date=date(2030, 1, 1), skill_id=original.id)

    assert skills.find_by_id(db, original.id).owner == "Leo"
    assert skills.find_by_owner(db, "Lia") == []


def test_find_by_id_returns_none_when_missing(db):
    assert skills.find_by_id(db, 999) is None


def test_delete_by_id_removes_exactly_that_row(db):
    keep = _add(db, "Lia", "Learn Go")
    drop = _add(db, "Lia", "Learn Rust")

    assert skills.delete_by_id(db, drop.id) is True

    assert [s.id for s in skills.find_by_owner(db, "Lia")] == [keep.id]


def test_delete_by_id_of_missing_row_is_a_no_op(db):
    _add(db, "Leo", "Learn Java")

    assert skills.delete_by_id(db, 12345) is False

    assert len(skills.find_by_owner(db, "Leo")) == 1


def test_delete_by_id_ignores_ownership(db):
    leo_skill = _add(db, "Leo", "Learn Java")

    assert skills.delete_by_id(db, leo_skill.id, requested_by="Lia") is True
    assert skills.find_by_owner(db, "Leo") == []


def test_out_of_range_ids_are_treated_as_missing(db):
    _add(db, "Lia", "Learn Go")

    assert skills.find_by_id(db, skills.MAX_ID + 1) is None
    assert skills.find_by_id(db, skills.MIN_ID - 1) is None
    assert skills.delete_by_id(db, 10 ** 20) is False
    assert len(skills.find_by_owner(db, "Lia")) == 1
