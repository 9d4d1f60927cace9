"""
Read-only data sources for the matcher.

The matcher only needs two capabilities: "fetch all activities" and
"fetch patient by id". Any object exposing them can be injected; the
in-memory implementations here also carry the browsing queries
(keyword search and tag filters) used by the catalog and patient lists.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from models import Activity, PatientProfile

logger = logging.getLogger(__name__)


class ActivityCatalog(Protocol):
    def all_activities(self) -> Sequence[Activity]:
        ...


class PatientDirectory(Protocol):
    def get_patient(self, patient_id: str) -> Optional[PatientProfile]:
        ...


@dataclass(frozen=True)
class FilterOptions:
    """Sorted, de-duplicated values available for the catalog filters."""
    goal_areas: Tuple[str, ...]
    age_groups: Tuple[str, ...]
    difficulty_levels: Tuple[str, ...]


def _index_by_id(items: Iterable, kind: str) -> Dict[str, object]:
    index = {}
    for item in items:
        if item.id in index:
            raise ValueError(f"Duplicate {kind} id: {item.id}")
        index[item.id] = item
    return index


class InMemoryActivityCatalog:
    """
    Static activity table.
    Catalog order is preserved; the matcher relies on it to break score ties.
    """

    def __init__(self, activities: Iterable[Activity]):
        self._activities: Tuple[Activity, ...] = tuple(activities)
        self._by_id = _index_by_id(self._activities, "activity")

    def __len__(self) -> int:
        return len(self._activities)

    def all_activities(self) -> Sequence[Activity]:
        return self._activities

    def get_activity(self, activity_id: str) -> Optional[Activity]:
        return self._by_id.get(activity_id)

    def search(
        self,
        term: str = "",
        goal_areas: Sequence[str] = (),
        age_groups: Sequence[str] = (),
        difficulty_levels: Sequence[str] = ()
    ) -> List[Activity]:
        """
        Keyword search over title and description, narrowed by tag filters.

        The keyword is a case-insensitive substring. Each non-empty filter list
        keeps activities carrying at least one of the listed values exactly.
        All conditions combine with AND.
        """
        needle = term.strip().lower()
        results = []
        for activity in self._activities:
            if needle and needle not in activity.title.lower() \
                    and needle not in activity.description.lower():
                continue
            if goal_areas and not any(g in activity.tags.goal_areas for g in goal_areas):
                continue
            if age_groups and not any(a in activity.tags.age_groups for a in age_groups):
                continue
            if difficulty_levels and activity.tags.difficulty_level.value not in difficulty_levels:
                continue
            results.append(activity)

        logger.debug(f"Catalog search '{term}' returned {len(results)} of {len(self._activities)}")
        return results

    def filter_options(self) -> FilterOptions:
        return FilterOptions(
            goal_areas=tuple(sorted({g for a in self._activities for g in a.tags.goal_areas})),
            age_groups=tuple(sorted({g for a in self._activities for g in a.tags.age_groups})),
            difficulty_levels=tuple(sorted({a.tags.difficulty_level.value for a in self._activities})),
        )


class InMemoryPatientDirectory:
    """Static patient table keyed by id."""

    def __init__(self, patients: Iterable[PatientProfile]):
        self._patients: Tuple[PatientProfile, ...] = tuple(patients)
        self._by_id = _index_by_id(self._patients, "patient")

    def __len__(self) -> int:
        return len(self._patients)

    def get_patient(self, patient_id: str) -> Optional[PatientProfile]:
        return self._by_id.get(patient_id)

    def all_patients(self) -> Sequence[PatientProfile]:
        return self._patients

    def search(self, term: str = "") -> List[PatientProfile]:
        """Case-insensitive substring search over name, goals and interests."""
        needle = term.strip().lower()
        if not needle:
            return list(self._patients)

        return [
            p for p in self._patients
            if needle in p.name.lower()
            or any(needle in goal.lower() for goal in p.treatment_goals)
            or any(needle in interest.lower() for interest in p.interests)
        ]
