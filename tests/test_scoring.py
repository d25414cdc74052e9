"""Tests for pair scoring and the rank ladder."""

import pytest

from coachmatch.data_models import InstructorProfile, LearnerProfile, RankTier
from coachmatch.errors import RoleMismatchError
from coachmatch.scoring import ScoreWeights, rank_for_score, score_pair


class TestScorePair:
    """Reference pairings and per-factor behaviour."""

    def test_full_match_scores_every_factor(self, instructor, learner):
        result = score_pair(instructor, learner)

        assert result.score == 78
        assert result.rank == RankTier.EXCELLENT
        assert len(result.details) == 5

    def test_details_follow_evaluation_order(self, instructor, learner):
        result = score_pair(instructor, learner)

        assert result.details == (
            "1 target muscle group matched +15 pts",
            "Same gym +25 pts",
            "1 available day in common +8 pts",
            "Same time slot +20 pts",
            "Experienced instructor +10 pts",
        )

    def test_junior_instructor_loses_only_the_bonus(self, instructor, learner):
        junior = instructor.model_copy(update={"experience": 1})

        result = score_pair(junior, learner)

        assert result.score == 68
        assert result.rank == RankTier.GOOD
        assert len(result.details) == 4
        assert not any("Experienced" in line for line in result.details)

    def test_nothing_shared_scores_zero(self):
        instructor = InstructorProfile(
            id="t", gym="A", specialties=["legs"], experience=2,
            availableDays=["Sat"], availableTime="morning",
        )
        learner = LearnerProfile(
            id="l", gym="B", targetMuscles=["chest"],
            availableDays=["Mon"], availableTime="night",
        )

        result = score_pair(instructor, learner)

        assert result.score == 0
        assert result.rank == RankTier.LOW
        assert result.details == ()

    def test_bare_profiles_do_not_fail(self, bare_instructor, bare_learner):
        result = score_pair(bare_instructor, bare_learner)

        assert result.score == 0
        assert result.rank == RankTier.LOW
        assert result.details == ()

    def test_muscle_and_day_counts_multiply(self):
        instructor = InstructorProfile(id="t", specialties=["chest", "back", "legs"], availableDays=["Mon", "Wed", "Fri"])
        learner = LearnerProfile(id="l", targetMuscles=["chest", "legs", "abs"], availableDays=["Mon", "Wed", "Fri", "Sun"])

        result = score_pair(instructor, learner)

        assert result.score == 2 * 15 + 3 * 8
        assert result.details == (
            "2 target muscle groups matched +30 pts",
            "3 available days in common +24 pts",
        )

    def test_gym_requires_both_present(self):
        result = score_pair(InstructorProfile(id="t"), LearnerProfile(id="l"))
        assert result.score == 0

        result = score_pair(InstructorProfile(id="t", gym="G"), LearnerProfile(id="l"))
        assert result.score == 0

    def test_gym_comparison_is_case_sensitive(self):
        result = score_pair(InstructorProfile(id="t", gym="G"), LearnerProfile(id="l", gym="g"))

        assert result.score == 0

    def test_time_band_requires_both_present(self):
        result = score_pair(InstructorProfile(id="t", availableTime=""), LearnerProfile(id="l"))

        assert result.score == 0

    @pytest.mark.parametrize("experience,bonus", [(None, 0), (0, 0), (2, 0), (3, 10), ("3", 10), ("10 years", 10), ("lots", 0)])
    def test_experience_bonus_is_binary_at_three(self, experience, bonus):
        result = score_pair(InstructorProfile(id="t", experience=experience), LearnerProfile(id="l"))

        assert result.score == bonus

    def test_is_idempotent(self, instructor, learner):
        assert score_pair(instructor, learner) == score_pair(instructor, learner)

    def test_custom_weights(self, instructor, learner):
        weights = ScoreWeights(w_gym=40)

        assert score_pair(instructor, learner, weights).score == 78 - 25 + 40


class TestContributionIndependence:
    """Toggling one factor moves the score by exactly that factor."""

    @pytest.mark.parametrize(
        "update,target,delta",
        [
            ({"specialties": frozenset({"back"})}, "instructor", 15),
            ({"gym": "Other"}, "instructor", 25),
            ({"available_days": frozenset({"Sun"})}, "learner", 8),
            ({"available_time": "morning"}, "learner", 20),
            ({"experience": 0}, "instructor", 10),
        ],
    )
    def test_single_factor_toggle(self, instructor, learner, update, target, delta):
        base = score_pair(instructor, learner).score
        if target == "instructor":
            instructor = instructor.model_copy(update=update)
        else:
            learner = learner.model_copy(update=update)

        toggled = score_pair(instructor, learner)

        assert base - toggled.score == delta
        assert len(toggled.details) == 4


class TestRoleContract:
    """The calculator only accepts an instructor then a learner."""

    def test_swapped_arguments_raise(self, instructor, learner):
        with pytest.raises(RoleMismatchError):
            score_pair(learner, instructor)

    def test_two_instructors_raise(self, instructor):
        with pytest.raises(RoleMismatchError, match="instructor"):
            score_pair(instructor, instructor)

    def test_two_learners_raise(self, learner):
        with pytest.raises(RoleMismatchError):
            score_pair(learner, learner)


class TestRankForScore:
    """Threshold ladder."""

    @pytest.mark.parametrize(
        "score,tier",
        [
            (201, RankTier.EXCELLENT),
            (70, RankTier.EXCELLENT),
            (69, RankTier.GOOD),
            (50, RankTier.GOOD),
            (49, RankTier.FAIR),
            (30, RankTier.FAIR),
            (29, RankTier.LOW),
            (0, RankTier.LOW),
        ],
    )
    def test_boundaries(self, score, tier):
        assert rank_for_score(score) == tier

    def test_tiers_are_monotonic(self):
        order = [RankTier.LOW, RankTier.FAIR, RankTier.GOOD, RankTier.EXCELLENT]
        levels = [order.index(rank_for_score(s)) for s in range(0, 202)]

        assert levels == sorted(levels)

    def test_every_tier_has_a_badge(self):
        assert {tier.badge for tier in RankTier} == {"🔥", "✨", "👍", "🤔"}
