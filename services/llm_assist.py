"""
Language-Model Assist
Asks an OpenAI-compatible chat completion endpoint for extra search criteria
"""
import json
import re
import httpx
from pydantic import ValidationError
from typing import Optional
from models.criteria import SearchCriteria
from models.outcome import Outcome
from utils.errors import AssistError
from config import Settings, settings as default_settings
import logging

logger = logging.getLogger(__name__)


PROMPT_TEMPLATE = """You help search a database of Chinese manufacturing companies.
Read the user query and answer ONLY with a JSON object of this exact shape:

{{
  "products": ["lower-case product terms in English, e.g. pvc, flooring, led"],
  "location": ["lower-case Chinese province names in pinyin, e.g. guangdong"],
  "industry": ["lower-case industry terms in English, e.g. automotive"],
  "employee_range": {{"operator": "at_least" | "at_most" | "less_than", "count": 50}} or null,
  "credit_rating": "good" | "medium" | "low" or null,
  "founded_after": 2010 or null,
  "has_website": true or null,
  "company_name": "name fragment" or null
}}

Use empty lists and null when the query says nothing about a field.

Query: {query}"""

CODE_FENCE = re.compile(r"^\s*```(?:json)?\s*|\s*```\s*$", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` line and a trailing ``` marker"""
    return CODE_FENCE.sub("", text).strip()


def parse_criteria_payload(content: str) -> SearchCriteria:
    """
    Parse completion text into SearchCriteria

    Raises:
        AssistError: If the text is not a JSON object of the criteria shape
    """
    if not isinstance(content or "", str):
        raise AssistError(f"Expected completion text, got {type(content).__name__}")

    cleaned = strip_code_fences(content or "")

    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise AssistError("Completion is not valid JSON", e)

    if not isinstance(payload, dict):
        raise AssistError(f"Expected a JSON object, got {type(payload).__name__}")

    try:
        return SearchCriteria.model_validate(payload)
    except ValidationError as e:
        raise AssistError("Completion does not match the criteria shape", e)


class LLMAssist:
    """Client for the criteria-suggestion completion call"""

    def __init__(
        self,
        config: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.config = config or default_settings
        self.http_client = http_client

    @property
    def enabled(self) -> bool:
        return bool(self.config.openai_api_key)

    def build_payload(self, query: str) -> dict:
        return {
            "model": self.config.assist_model,
            "messages": [
                {"role": "user", "content": PROMPT_TEMPLATE.format(query=query)}
            ],
            "max_tokens": self.config.assist_max_tokens,
            "temperature": self.config.assist_temperature
        }

    async def _complete(self, query: str) -> str:
        """
        Run the completion call and return the first choice's text

        Raises:
            AssistError: On transport errors, non-2xx status or malformed body
        """
        url = f"{self.config.openai_base_url.rstrip('/')}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.config.openai_api_key}",
            "Content-Type": "application/json"
        }

        try:
            if self.http_client is not None:
                response = await self.http_client.post(
                    url, headers=headers, json=self.build_payload(query)
                )
            else:
                async with httpx.AsyncClient(timeout=self.config.assist_timeout) as client:
                    response = await client.post(
                        url, headers=headers, json=self.build_payload(query)
                    )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise AssistError("Completion request failed", e)
        except ValueError as e:
            raise AssistError("Completion response is not JSON", e)

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise AssistError("Completion response has no message content", e)

        if not isinstance(content, str):
            raise AssistError(
                f"Completion content is {type(content).__name__}, expected text"
            )

        return content

    async def suggest(self, query: str) -> Outcome[SearchCriteria]:
        """
        Ask the language model for criteria

        Args:
            query: Raw user query

        Returns:
            Outcome with the suggested criteria, or a failure description.
            Never raises.
        """
        if not self.enabled:
            return Outcome.failure("language-model assist is not configured")

        try:
            content = await self._complete(query)
            criteria = parse_criteria_payload(content)
        except AssistError as e:
            logger.warning(f"Language-model assist failed: {e}")
            return Outcome.failure(str(e))
        except Exception as e:
            logger.error(f"Unexpected language-model assist error: {e}", exc_info=True)
            return Outcome.failure(f"unexpected assist error: {e}")

        logger.debug(f"Language-model criteria: {criteria.model_dump(exclude_none=True)}")
        return Outcome.success(criteria)
