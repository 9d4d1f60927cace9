"""
Data provider tests: lookups, browsing search and filter options.
"""

import pytest

from matcher.providers import InMemoryActivityCatalog, InMemoryPatientDirectory

from factories import make_activity, make_patient


def ids(items):
    return [i.id for i in items]


class TestActivityCatalog:

    def test_preserves_order(self, catalog):
        assert ids(catalog.all_activities()) == ["act1", "act2", "act3", "act4", "act5"]
        assert len(catalog) == 5

    def test_duplicate_ids_rejected(self):
        a = make_activity("dup", ["Mindfulness"], ["Adults (18+)"])
        with pytest.raises(ValueError, match="dup"):
            InMemoryActivityCatalog([a, a])

    def test_get_activity(self, catalog):
        assert catalog.get_activity("act5").title == "Memory Collage"
        assert catalog.get_activity("missing") is None

    def test_search_title_and_description(self, catalog):
        assert ids(catalog.search("NATURE")) == ["act2"]
        assert ids(catalog.search("collages")) == ["act5"]

    def test_blank_search_returns_all(self, catalog):
        assert len(catalog.search("  ")) == 5

    def test_goal_filter_is_exact_membership(self, catalog):
        assert ids(catalog.search(goal_areas=["Self-Expression"])) == ["act1", "act5"]
        assert catalog.search(goal_areas=["Expression"]) == []

    def test_filters_combine_with_and(self, catalog):
        results = catalog.search(age_groups=["Seniors (65+)"], difficulty_levels=["Easy"])
        assert ids(results) == ["act4"]

    def test_filter_values_combine_with_or(self, catalog):
        results = catalog.search(goal_areas=["Mindfulness", "Memory Enhancement"])
        assert ids(results) == ["act2", "act5"]

    def test_term_and_filter(self, catalog):
        assert catalog.search("cards", difficulty_levels=["Medium"]) == []

    def test_filter_options(self, catalog):
        options = catalog.filter_options()

        assert options.difficulty_levels == ("Easy", "Medium")
        assert options.age_groups == (
            "Adolescents (13-17)", "Adults (18+)", "Children (6-12)",
            "Individuals with ASD", "Seniors (65+)",
        )
        assert options.goal_areas[0] == "Anxiety Reduction"
        assert len(options.goal_areas) == len(set(options.goal_areas))


class TestPatientDirectory:

    def test_lookup(self, directory):
        assert directory.get_patient("pat3").name == "James Wilson"
        assert directory.get_patient("nobody") is None

    def test_duplicate_ids_rejected(self):
        p = make_patient("p1", 30, ["Mindfulness"])
        with pytest.raises(ValueError):
            InMemoryPatientDirectory([p, p])

    def test_search_by_name(self, directory):
        assert ids(directory.search("alex")) == ["pat1"]

    def test_search_goals_and_interests(self, directory):
        # 'Social Skills' / 'Social Connection' goals and the 'Social media' interest
        assert ids(directory.search("social")) == ["pat1", "pat2", "pat4", "pat5"]
        assert ids(directory.search("music")) == ["pat2", "pat4"]

    def test_empty_search_returns_all(self, directory):
        assert len(directory.search("")) == 5
