"""
Sample dataset loader.

Re-hydrates the bundled JSON catalog (or a generator cache written by
save_dataset) into pydantic models.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from models import Activity, PatientProfile, TherapyPlanChat

logger = logging.getLogger(__name__)

SEED_PATH = Path(__file__).with_name("seed_catalog.json")


@dataclass
class SeedData:
    activities: List[Activity] = field(default_factory=list)
    patients: List[PatientProfile] = field(default_factory=list)
    chats: List[TherapyPlanChat] = field(default_factory=list)


def load_seed_data(path: Optional[Union[str, Path]] = None) -> SeedData:
    """
    Load a dataset file. Defaults to the bundled sample catalog.
    Missing files and bad JSON propagate; invalid records raise ValidationError.
    """
    path = Path(path) if path else SEED_PATH
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    seed = SeedData(
        activities=[Activity(**item) for item in data.get('activities', [])],
        patients=[PatientProfile(**item) for item in data.get('patients', [])],
        chats=[TherapyPlanChat(**item) for item in data.get('chats', [])],
    )
    logger.info(
        f"Loaded {len(seed.activities)} activities, {len(seed.patients)} patients, "
        f"{len(seed.chats)} conversations from {path.name}"
    )
    return seed


def save_dataset(seed: SeedData, path: Union[str, Path]) -> None:
    """Write a dataset in the same shape load_seed_data reads."""
    serializable = {
        "activities": [a.model_dump(mode='json') for a in seed.activities],
        "patients": [p.model_dump(mode='json') for p in seed.patients],
        "chats": [c.model_dump(mode='json') for c in seed.chats],
    }
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(serializable, f, indent=2)
    logger.info(f"Saved dataset to {path}")
