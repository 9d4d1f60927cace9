"""
Eligibility rule tests: age brackets and goal substring matching.
"""

import pytest

from matcher.criteria import (
    AgeBracket,
    age_bracket,
    age_eligible,
    evaluate,
    goal_overlap,
    matched_goals,
)

from factories import make_activity, make_patient


class TestAgeBracket:

    @pytest.mark.parametrize("age,bracket", [
        (0, AgeBracket.CHILDREN),
        (12, AgeBracket.CHILDREN),
        (13, AgeBracket.ADOLESCENT),
        (17, AgeBracket.ADOLESCENT),
        (18, AgeBracket.ADULT),
        (64, AgeBracket.ADULT),
        (65, AgeBracket.SENIOR),
        (101, AgeBracket.SENIOR),
    ])
    def test_boundaries(self, age, bracket):
        assert age_bracket(age) == bracket

    def test_negative_age_rejected(self):
        with pytest.raises(ValueError):
            age_bracket(-1)


class TestAgeRule:

    def test_keyword_containment(self):
        activity = make_activity("a", ["Mindfulness"], ["Adults (18+)"])
        assert age_eligible(make_patient("p", 30, ["Mindfulness"]), activity)

    def test_adolescent_tag_matches_plural_label(self):
        activity = make_activity("a", ["Mindfulness"], ["Adolescents (13-17)"])
        assert age_eligible(make_patient("p", 15, ["Mindfulness"]), activity)

    def test_senior_not_eligible_for_adult_only(self):
        activity = make_activity("a", ["Mindfulness"], ["Adults (18+)"])
        assert not age_eligible(make_patient("p", 65, ["Mindfulness"]), activity)

    def test_keyword_is_case_sensitive(self):
        activity = make_activity("a", ["Mindfulness"], ["children (6-12)"])
        assert not age_eligible(make_patient("p", 9, ["Mindfulness"]), activity)

    def test_non_bracket_tags_never_match(self):
        activity = make_activity("a", ["Mindfulness"], ["Individuals with ASD", "Early Childhood (0-5)"])
        for age in (4, 15, 30, 70):
            assert not age_eligible(make_patient("p", age, ["Mindfulness"]), activity)


class TestGoalRule:

    def test_exact_goal(self):
        activity = make_activity("a", ["Emotional Regulation"], ["Children (6-12)"])
        assert goal_overlap(make_patient("p", 9, ["Emotional Regulation"]), activity)

    def test_case_insensitive(self):
        activity = make_activity("a", ["Emotional Regulation"], ["Children (6-12)"])
        assert goal_overlap(make_patient("p", 9, ["emotional REGULATION"]), activity)

    def test_goal_inside_tag(self):
        activity = make_activity("a", ["Emotional Regulation"], ["Children (6-12)"])
        assert goal_overlap(make_patient("p", 9, ["Regulation"]), activity)

    def test_tag_inside_goal_does_not_count(self):
        """Only the tag-contains-goal direction is checked."""
        activity = make_activity("a", ["Regulation"], ["Children (6-12)"])
        assert not goal_overlap(make_patient("p", 9, ["Emotional Regulation"]), activity)

    def test_trailing_space_tag_matches_same_goal(self):
        """Tags are compared as stored, including surrounding whitespace."""
        activity = make_activity("a", ["Emotional Regulation "], ["Children (6-12)"])

        assert activity.tags.goal_areas == ["Emotional Regulation "]
        assert goal_overlap(make_patient("p", 9, ["Emotional Regulation "]), activity)

    def test_no_goal_tags_never_overlap(self):
        activity = make_activity("a", [], ["Children (6-12)"])
        assert not goal_overlap(make_patient("p", 9, ["Emotional Regulation"]), activity)

    def test_no_age_tags_never_eligible(self):
        activity = make_activity("a", ["Mindfulness"], [])
        for age in (9, 15, 30, 70):
            assert not age_eligible(make_patient("p", age, ["Mindfulness"]), activity)

    def test_matched_goals_keep_patient_order(self):
        activity = make_activity("a", ["Stress Management", "Mindfulness"], ["Adults (18+)"])
        patient = make_patient("p", 40, ["Mindfulness", "Sleep", "Stress Management"])

        assert matched_goals(patient, activity) == ["Mindfulness", "Stress Management"]


class TestEvaluate:

    def test_eligible_returns_none(self):
        activity = make_activity("a", ["Mindfulness"], ["Adults (18+)"])
        assert evaluate(make_patient("p", 40, ["Mindfulness"]), activity) is None

    def test_goal_reported_first(self):
        activity = make_activity("a", ["Mindfulness"], ["Children (6-12)"])
        rejection = evaluate(make_patient("p", 40, ["Grief Processing"]), activity)

        assert rejection.criterion == "Goal"
        assert rejection.activity_id == "a"
        assert rejection.patient_id == "p"
