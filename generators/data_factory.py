"""
LLM-powered data generator for the therapy activity catalog.
STRATEGY: one batched request per record type, validated item by item.
Strict schema prompts + robust parsing keep validation failures rare;
the ones that slip through are logged and skipped.
"""

import os
import json
import logging
import re
import google.generativeai as genai
from typing import List, Tuple, Any, Type
from pydantic import ValidationError, BaseModel

from models import Activity, PatientProfile, Difficulty, SessionLength

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

GOAL_AREAS = [
    "Emotional Regulation", "Self-Expression", "Cognitive Processing", "Social Skills",
    "Communication", "Mindfulness", "Anxiety Reduction", "Sensory Integration",
    "Stress Management", "Body Awareness", "Trauma Processing", "Memory Enhancement",
]

AGE_GROUPS = [
    "Early Childhood (0-5)", "Children (6-12)", "Adolescents (13-17)",
    "Adults (18+)", "Seniors (65+)", "Individuals with ASD",
]

CULTURAL_CONTEXTS = [
    "Western", "Eastern", "African", "Indigenous", "Latin American",
    "Middle Eastern", "Universal", "Adaptable", "Nature-Based",
]


class DataGenerator:
    def __init__(self, api_key: str | None = None, model_name: str | None = None):
        self.api_key = api_key or os.environ.get("GOOGLE_API_KEY")
        if not self.api_key:
            raise ValueError("GOOGLE_API_KEY not found. Please set it in environment.")

        genai.configure(api_key=self.api_key)
        self.model = genai.GenerativeModel(model_name or os.environ.get("GEMINI_MODEL", DEFAULT_MODEL))
        self.total_cost = 0.0

    def _estimate_cost(self, prompt_tokens: int, response_tokens: int) -> float:
        return (prompt_tokens * 0.075 + response_tokens * 0.30) / 1_000_000

    def _robust_parse_json(self, raw_text: str) -> List[Any]:
        """
        Handles markdown fences and normalizes the payload to a list of dicts.
        """
        if not raw_text:
            return []

        # 1. Clean Markdown Code Blocks
        clean_text = re.sub(r"```json\s*|\s*```", "", raw_text).strip()

        try:
            data = json.loads(clean_text)
        except json.JSONDecodeError:
            # Fallback: pull out the outermost list
            match = re.search(r'(\[.*\])', clean_text, re.DOTALL)
            if not match:
                return []
            try:
                data = json.loads(match.group(1))
            except json.JSONDecodeError:
                return []

        # 2. Normalize Data Shape
        if isinstance(data, list):
            return [item for item in data if isinstance(item, dict)]
        if isinstance(data, dict):
            for key in ['activities', 'patients', 'result']:
                if key in data and isinstance(data[key], list):
                    return data[key]
            return [data]
        return []

    def _fetch_big_batch(self, prompt: str, model_class: Type[BaseModel], id_prefix: str) -> Tuple[List[Any], float]:
        """
        Executes one generation request and validates each returned item.
        Items get sequential ids so they never collide with catalog ids.
        """
        try:
            generation_config = genai.GenerationConfig(
                response_mime_type="application/json",
                max_output_tokens=16000,
                temperature=0.7
            )
            response = self.model.generate_content(prompt, generation_config=generation_config)
        except Exception as e:
            logger.error(f"Batch Generation Failed: {e}")
            return [], 0.0

        cost = 0.0
        usage = getattr(response, 'usage_metadata', None)
        if usage is not None:
            cost = self._estimate_cost(usage.prompt_token_count, usage.candidates_token_count)
        self.total_cost += cost

        valid_items = []
        for i, item in enumerate(self._robust_parse_json(response.text)):
            if not isinstance(item, dict):
                logger.warning(f"Skipping non-object item {i} in batch")
                continue
            item['id'] = f"{id_prefix}_{i:03d}"
            try:
                valid_items.append(model_class(**item))
            except ValidationError as e:
                logger.warning(f"Skipping invalid item {i} in batch: {e.json()}")

        return valid_items, cost

    def generate_activities(self, count: int = 10) -> Tuple[List[Activity], float]:
        """
        Generates therapy activities using a STRONG SCHEMA PROMPT.
        """
        prompt = f"""
        Generate {count} therapeutic activities for a therapy activity catalog.

        OUTPUT FORMAT:
        A single valid JSON Array containing {count} objects.

        STRICT SCHEMA RULES (Follow exactly to avoid validation errors):

        1. REQUIRED FIELDS:
           - "title" (string)
           - "description" (string, one or two sentences)
           - "tags": {{
               "goal_areas": list drawn from {json.dumps(GOAL_AREAS)},
               "age_groups": list drawn from {json.dumps(AGE_GROUPS)},
               "difficulty_level": one of {json.dumps([d.value for d in Difficulty])},
               "cultural_context": list drawn from {json.dumps(CULTURAL_CONTEXTS)},
               "session_length": one of {json.dumps([s.value for s in SessionLength])}
             }}
           - "materials" (list of strings)
           - "steps" (list of 3-6 strings, in order)
           - "created_by" (string, a clinician name)
           - "created_at" (YYYY-MM-DD)
           - "effectiveness" (number between 1.0 and 5.0, one decimal)

        2. LOGIC:
           - Age group labels MUST be copied verbatim from the list above.
           - Use a mix of difficulty levels and effectiveness scores.
        """

        logger.info(f"Requesting {count} therapy activities...")
        activities, cost = self._fetch_big_batch(prompt, Activity, "gen_act")
        logger.info(f"Generated {len(activities)} valid activities.")
        return activities, cost

    def generate_patients(self, count: int = 5) -> Tuple[List[PatientProfile], float]:
        prompt = f"""
        Generate {count} fictional therapy patient profiles.
        OUTPUT: JSON Array.
        FIELDS: name (string), age (integer 4-95), cultural_background (list of strings),
        interests (list of strings), treatment_goals (list of 2-3 strings drawn from {json.dumps(GOAL_AREAS)}),
        challenges (list of strings), preferred_activities (list of strings), additional_notes (string).
        CRITICAL RULES:
        - Spread ages across children, adolescents, adults and seniors.
        - Do NOT include real personal data.
        """

        logger.info(f"Requesting {count} patient profiles...")
        patients, cost = self._fetch_big_batch(prompt, PatientProfile, "gen_pat")
        logger.info(f"Generated {len(patients)} valid patient profiles.")
        return patients, cost
