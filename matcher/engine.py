"""
The Activity Matching Engine.

Pipeline for a single patient:
1. Lookup - resolve the patient id through the injected directory.
2. Filter - keep activities passing both the goal and the age rules.
3. Rank - order by effectiveness, highest first (stable on ties).
4. Truncate - return the top MAX_RESULTS.

Pure read-only query. Unknown patients yield an empty list, not an error.
"""

import logging
from typing import List

from models import Activity, PatientProfile
from .criteria import evaluate, MatchRejection
from .providers import ActivityCatalog, PatientDirectory

logger = logging.getLogger(__name__)


class ActivityMatcher:
    """
    Main matching engine.
    Ingests a catalog and a patient directory, outputs ranked recommendations.
    """

    MAX_RESULTS = 3

    def __init__(self, activities: ActivityCatalog, patients: PatientDirectory):
        self.activities = activities
        self.patients = patients

    def match(self, patient_id: str) -> List[Activity]:
        """Top activities for a stored patient, or [] if the id is unknown."""
        patient = self.patients.get_patient(patient_id)
        if patient is None:
            logger.debug(f"No patient with id {patient_id!r}; returning no matches")
            return []
        return self.match_profile(patient)

    def match_profile(self, patient: PatientProfile) -> List[Activity]:
        """Same ranking for a profile that need not be in the directory."""
        eligible = [a for a in self.activities.all_activities() if evaluate(patient, a) is None]

        # sorted() is stable, so equal scores keep catalog order
        eligible = sorted(eligible, key=lambda a: a.effectiveness, reverse=True)
        top = eligible[:self.MAX_RESULTS]

        logger.info(
            f"Matched {len(top)} activities for {patient.id} "
            f"({len(eligible)} eligible of {len(self.activities.all_activities())})"
        )
        return top

    def explain(self, patient: PatientProfile) -> List[MatchRejection]:
        """Why each rejected activity was filtered out, in catalog order."""
        rejections = []
        for activity in self.activities.all_activities():
            rejection = evaluate(patient, activity)
            if rejection is not None:
                rejections.append(rejection)
        return rejections
