"""
Main Execution Script for the Therapy Activity Matcher.
Loads the catalog, prints recommendations per patient and exports
a treatment plan from each patient's latest conversation.

Usage: python run_matcher.py [patient_id ...]
"""

import os
import sys
import logging

from generators.data_factory import DataGenerator
from generators.seed import load_seed_data, save_dataset, SeedData
from matcher.engine import ActivityMatcher
from matcher.providers import InMemoryActivityCatalog, InMemoryPatientDirectory
from planner.assistant import PlanAssistant, ChatHistory
from planner.export import export_treatment_plan

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger("Main")

# --- CONFIGURATION ---
CACHE_FILENAME = "generated_catalog.json"
USE_CACHE = True          # Load CACHE_FILENAME instead of the bundled sample when present
GENERATE_EXTRA = False    # Ask Gemini for extra activities/patients (needs GOOGLE_API_KEY)
API_KEY = os.environ.get("GOOGLE_API_KEY")
# ---------------------


def acquire_data() -> SeedData:
    """Sample catalog, optionally replaced by the cache or extended by the generator."""
    if USE_CACHE and os.path.exists(CACHE_FILENAME):
        return load_seed_data(CACHE_FILENAME)

    data = load_seed_data()
    if not GENERATE_EXTRA:
        return data

    if not API_KEY:
        logger.warning("GOOGLE_API_KEY not set; skipping generation and using the sample catalog.")
        return data

    generator = DataGenerator(api_key=API_KEY)
    activities, cost_act = generator.generate_activities(count=10)
    patients, cost_pat = generator.generate_patients(count=5)
    logger.info(f"Total Estimated LLM Cost: ${cost_act + cost_pat:.4f}")

    data.activities.extend(activities)
    data.patients.extend(patients)
    save_dataset(data, CACHE_FILENAME)
    return data


def main(patient_ids=None):
    data = acquire_data()

    catalog = InMemoryActivityCatalog(data.activities)
    directory = InMemoryPatientDirectory(data.patients)
    matcher = ActivityMatcher(catalog, directory)
    assistant = PlanAssistant(matcher)
    history = ChatHistory(data.chats)

    targets = patient_ids or [p.id for p in directory.all_patients()]

    print("\n" + "=" * 50)
    print("ACTIVITY RECOMMENDATIONS")
    print("=" * 50)

    for pid in targets:
        patient = directory.get_patient(pid)
        if patient is None:
            print(f"\n{pid}: unknown patient, no recommendations")
            continue

        print(f"\n{patient.name} (age {patient.age}) - goals: {', '.join(patient.treatment_goals)}")
        matches = matcher.match(pid)
        if not matches:
            print("   No matching activities")
        for rank, activity in enumerate(matches, start=1):
            print(f"   {rank}. {activity.title} [{activity.effectiveness:.1f}]")

        chat = history.latest_for(pid) or assistant.start_chat(patient, f"Therapy Plan for {patient.name}")
        print()
        print(export_treatment_plan(chat, patient, assistant))


if __name__ == "__main__":
    main(sys.argv[1:])
