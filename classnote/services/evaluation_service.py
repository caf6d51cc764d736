import re
import json
import logging
from typing import List

from classnote.errors import GenerationError
from classnote.gemini_client import GeminiClient
from classnote.prompts.evaluation_prompt import build_evaluation_prompt, build_subject_prompt, DEFAULT_SUBJECTS

logger = logging.getLogger(__name__)

def extract_json(text: str) -> dict:
    """Pulls the outermost {...} out of a model reply."""
    match = re.search(r"\{.*\}", text or "", re.DOTALL)
    if not match:
        raise GenerationError(f"No JSON object in reply: {(text or '')[:200]}")
    try:
        data = json.loads(match.group(0))
    except ValueError as e:
        raise GenerationError(f"Invalid JSON in reply: {e}") from e
    if not isinstance(data, dict):
        raise GenerationError("Reply JSON is not an object")
    return data

class EvaluationGenerator:
    def __init__(self, client: GeminiClient):
        self.client = client

    async def generate_evaluation(self, student_name: str, subject: str, records: List[dict]) -> str:
        """
        records: [{"week", "content", "reflection"}] in week order.
        """
        prompt = build_evaluation_prompt(student_name, subject, records)
        reply = await self.client.generate_content(prompt)
        evaluation = extract_json(reply).get("evaluation")
        if not isinstance(evaluation, str) or not evaluation.strip():
            raise GenerationError("Reply has no evaluation text")
        return evaluation.strip()

    async def extract_subjects(self, content: str) -> List[str]:
        try:
            reply = await self.client.generate_content(build_subject_prompt(content))
            subjects = extract_json(reply).get("subjects")
        except GenerationError as e:
            logger.error(f"Subject extraction failed: {e}")
            return list(DEFAULT_SUBJECTS)
        if not isinstance(subjects, list):
            return list(DEFAULT_SUBJECTS)
        return [str(s) for s in subjects]
