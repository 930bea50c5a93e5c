from datetime import datetime, timezone

import pytest

from resumate.db.models import Profile, Skill
from resumate.db.utils import atomic, replace_children, to_naive_utc


def _profile(db, ctx) -> Profile:
    profile = Profile(user_id=ctx.user_id, legal_first_name="Alice", legal_last_name="Smith")
    profile.skills = [Skill(name="Python"), Skill(name="SQL")]
    db.add(profile)
    db.commit()
    return profile


def test_to_naive_utc() -> None:
    aware = datetime(2024, 1, 1, 12, tzinfo=timezone.utc)
    assert to_naive_utc(aware) == datetime(2024, 1, 1, 12)
    assert to_naive_utc(None) is None


def test_replace_children_swaps_whole_collection(db, ctx) -> None:
    """Test replacing a collection with overlapping names."""
    profile = _profile(db, ctx)
    with atomic(db):
        replace_children(db, profile, "skills", [Skill(name="SQL"), Skill(name="Go")])
    db.expire_all()
    names = sorted(s.name for s in db.query(Skill).filter(Skill.profile_id == profile.id))
    assert names == ["Go", "SQL"]


def test_atomic_rolls_back_partial_replace(db, ctx) -> None:
    """Test a failure mid-replace leaves the old rows in place."""
    profile = _profile(db, ctx)
    with pytest.raises(RuntimeError):
        with atomic(db):
            replace_children(db, profile, "skills", [Skill(name="Go")])
            raise RuntimeError("boom")
    db.expire_all()
    names = sorted(s.name for s in db.query(Skill).filter(Skill.profile_id == profile.id))
    assert names == ["Python", "SQL"]
