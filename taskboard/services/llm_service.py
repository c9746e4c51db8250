import google.generativeai as genai
import json
import logging
import re
from typing import List, Optional, Protocol

from taskboard.config import GEMINI_API_KEY, GEMINI_MODEL

logger = logging.getLogger(__name__)

# Returned when the model answers without any JSON array
DEFAULT_SKILLS = ["Backend"]
# Returned in place of raising when the model call or parsing fails
FALLBACK_SKILLS = ["Error identifying skills with LLM"]

_JSON_ARRAY_RE = re.compile(r"\[.*?\]", re.DOTALL)


class SkillIdentifier(Protocol):
    async def identify(self, title: str) -> List[str]:
        ...


def build_prompt(task_title: str) -> str:
    return f"""Given the following task title, identify the required technical skills from this list: [Frontend, Backend or Both].

Task title: "{task_title}"

Return only the skill names as a JSON array, for example: ["Frontend", "Backend"]
Do not include any explanation, only the JSON array.
"""


def parse_skills(response_text: Optional[str]) -> List[str]:
    """Extract the skill names from a model answer.

    The first ``[...]`` span is parsed as JSON. An answer without one yields
    DEFAULT_SKILLS. Raises ValueError on an empty answer or invalid JSON.
    """
    if not response_text:
        raise ValueError("No response from LLM")

    match = _JSON_ARRAY_RE.search(response_text)
    if not match:
        return list(DEFAULT_SKILLS)

    skills = json.loads(match.group(0))
    return [str(skill).strip() for skill in skills if str(skill).strip()]


class GeminiSkillIdentifier:
    def __init__(self, api_key: Optional[str] = GEMINI_API_KEY, model_name: str = GEMINI_MODEL, model=None):
        if model is None:
            if api_key:
                genai.configure(api_key=api_key)
            else:
                logger.warning(f"GEMINI_API_KEY is not set, skill inference will return {FALLBACK_SKILLS}")
            model = genai.GenerativeModel(model_name=model_name)
        self.model = model

    async def identify(self, title: str) -> List[str]:
        try:
            response = await self.model.generate_content_async(build_prompt(title))
            response_text = response.text
            logger.debug(f"LLM response text: {response_text!r}")
            return parse_skills(response_text)
        except Exception as e:
            logger.error(f"Error identifying skills with LLM for {title!r}: {e}")
            return list(FALLBACK_SKILLS)
