"""Shared fixtures for coachmatch tests."""

import json

import pytest

from coachmatch.data_models import InstructorProfile, LearnerProfile


# ============================================================================
# Profile Fixtures
# ============================================================================

@pytest.fixture
def instructor() -> InstructorProfile:
    """Instructor from the reference pairing: chest/back, gym G, Mon/Tue evenings, 5 years."""
    return InstructorProfile(
        id="t1",
        name="Ren Sato",
        gym="G",
        specialties=["chest", "back"],
        experience=5,
        availableDays=["Mon", "Tue"],
        availableTime="evening",
    )


@pytest.fixture
def learner() -> LearnerProfile:
    """Learner who matches the reference instructor on every factor."""
    return LearnerProfile(
        id="l1",
        name="Yui Mori",
        gym="G",
        targetMuscles=["chest"],
        availableDays=["Mon"],
        availableTime="evening",
    )


@pytest.fixture
def bare_instructor() -> InstructorProfile:
    """Instructor with nothing but an id."""
    return InstructorProfile(id="t0")


@pytest.fixture
def bare_learner() -> LearnerProfile:
    """Learner with nothing but an id."""
    return LearnerProfile(id="l0")


@pytest.fixture
def population_records() -> list:
    """Plain store records, mixed roles and source role spellings."""
    return [
        {"id": "t1", "role": "trainer", "name": "Ren Sato", "gym": "G", "specialties": ["chest", "back"],
         "experience": "5", "availableDays": ["Mon", "Tue"], "availableTime": "evening"},
        {"id": "t2", "role": "trainer", "name": "Kai Ito", "gym": "H", "specialties": ["legs"],
         "experience": "1", "availableDays": ["Sat"], "availableTime": "morning"},
        {"id": "t3", "role": "instructor", "name": "Mika Abe", "gym": "G", "specialties": ["chest"],
         "availableDays": ["Mon"]},
        {"id": "l1", "role": "learner", "name": "Yui Mori", "gym": "G", "targetMuscles": ["chest"],
         "availableDays": ["Mon"], "availableTime": "evening", "goals": ["get stronger"]},
        {"id": "l2", "role": "beginner", "name": "Haru Ono", "gym": "H", "targetMuscles": ["legs"],
         "availableDays": ["Sat"], "availableTime": "morning"},
    ]


@pytest.fixture
def profiles_json(tmp_path, population_records):
    """Population written as a store-style JSON export."""
    path = tmp_path / "users.json"
    path.write_text(json.dumps({"users": population_records}), encoding="utf-8")
    return path


@pytest.fixture
def profiles_csv(tmp_path):
    """Population written as a survey-style CSV export with human headers."""
    path = tmp_path / "users.csv"
    path.write_text(
        "User ID,Role,Name,Gym,Specialties,Experience,targetMuscles,Available days,availableTime\n"
        "007,trainer,Ren Sato, G ,chest;back,5 years,,Mon;Tue,evening\n"
        "l1,learner,Yui Mori,G,,,chest,Mon,evening\n"
        "l2,learner,Haru Ono,,,,legs,Sat,\n",
        encoding="utf-8",
    )
    return path
