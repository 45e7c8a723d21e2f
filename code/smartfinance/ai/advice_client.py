import logging
import os
from typing import Any, Dict, Iterable
from urllib.parse import urlparse, urlunparse

import openai
import requests
from openai import AsyncOpenAI
from pydantic import ValidationError as PydanticValidationError

from smartfinance.core.errors import AdviceGenerationFailed
from smartfinance.core.models import AnalysisResult, FinancialField, UserProfile
from smartfinance.core.prompts import build_advice_prompt

logger = logging.getLogger(__name__)

ADVICE_BASE_URL = os.getenv("ADVICE_BASE_URL", "https://api.openai.com/v1")
ADVICE_MODEL = os.getenv("ADVICE_MODEL", "gpt-4o-mini")
ADVICE_TIMEOUT = float(os.getenv("ADVICE_TIMEOUT", "25"))
ADVICE_HEALTH_TIMEOUT = float(os.getenv("ADVICE_HEALTH_TIMEOUT", "1.0"))
ADVICE_MAX_RETRIES = max(0, int(os.getenv("ADVICE_MAX_RETRIES", "0")))
ADVICE_MAX_TOKENS = int(os.getenv("ADVICE_MAX_TOKENS", "1500"))
ADVICE_TEMPERATURE = float(os.getenv("ADVICE_TEMPERATURE", "0.2"))
ADVICE_API_KEY = os.getenv("ADVICE_API_KEY") or os.getenv("OPENAI_API_KEY")

SYSTEM_MESSAGE = "You are a personal finance advisor. Always answer with JSON that matches the given schema."

ANALYSIS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "overview": {"type": "string"},
        "suggestions": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "field": {"type": "string"},
                    "status": {"type": "string", "enum": ["Good", "Warning", "Alert"]},
                    "title": {"type": "string"},
                    "content": {"type": "string"},
                    "actionItem": {"type": "string"},
                },
                "required": ["field", "status", "title", "content", "actionItem"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["overview", "suggestions"],
    "additionalProperties": False,
}


def _base_url() -> str:
    parsed = urlparse(ADVICE_BASE_URL)
    path = parsed.path.rstrip("/")
    if path.endswith("/chat/completions"):
        path = path[: -len("/chat/completions")]
    elif path.endswith("/completions"):
        path = path[: -len("/completions")]
    base = parsed._replace(path=path, params="", query="", fragment="")
    return urlunparse(base)


def _get_client() -> AsyncOpenAI:
    if not ADVICE_API_KEY:
        raise RuntimeError("Missing ADVICE_API_KEY. Set the environment variable and restart the app.")
    return AsyncOpenAI(base_url=_base_url(), api_key=ADVICE_API_KEY, max_retries=ADVICE_MAX_RETRIES)


def check_backend_online(timeout: float | None = None) -> bool:
    base = _base_url().rstrip("/")
    health_timeout = timeout if timeout is not None else ADVICE_HEALTH_TIMEOUT
    headers = {"Authorization": f"Bearer {ADVICE_API_KEY}"} if ADVICE_API_KEY else {}
    for path in ("/models", "/health"):
        try:
            resp = requests.get(f"{base}{path}", timeout=health_timeout, headers=headers)
        except requests.RequestException:
            continue
        # Anything below 5xx means the endpoint answered.
        if resp.status_code < 500:
            return True
    return False


def extract_text(response: Dict[str, Any]) -> str:
    choices = response.get("choices") or []
    if not choices:
        return ""
    choice = choices[0]
    message = choice.get("message") if isinstance(choice, dict) else None
    if isinstance(message, dict):
        content = message.get("content")
        if isinstance(content, str):
            return content.strip()
        return ""
    text = choice.get("text") if isinstance(choice, dict) else None
    return str(text).strip() if text else ""


def strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    if not cleaned.startswith("```"):
        return cleaned
    lines = cleaned.splitlines()[1:]
    if lines and lines[-1].strip().startswith("```"):
        lines = lines[:-1]
    return "\n".join(lines).strip()


def parse_analysis(text: str) -> AnalysisResult:
    return AnalysisResult.model_validate_json(strip_code_fence(text))


async def query_model(prompt: str, max_tokens: int | None = None, temperature: float | None = None) -> Dict[str, Any]:
    token_limit = int(max_tokens) if max_tokens is not None else ADVICE_MAX_TOKENS
    async with _get_client() as client:
        response = await client.chat.completions.create(
            model=ADVICE_MODEL,
            messages=[
                {"role": "system", "content": SYSTEM_MESSAGE},
                {"role": "user", "content": prompt},
            ],
            temperature=ADVICE_TEMPERATURE if temperature is None else float(temperature),
            max_tokens=token_limit,
            response_format={
                "type": "json_schema",
                "json_schema": {"name": "analysis_result", "schema": ANALYSIS_SCHEMA, "strict": True},
            },
            timeout=ADVICE_TIMEOUT,
        )
    try:
        return response.model_dump()
    except AttributeError as exc:
        # A 200 with a non-JSON content type comes back as the raw body text.
        logger.error("Advice backend returned a non-JSON reply")
        raise AdviceGenerationFailed("Advice backend returned a non-JSON reply") from exc


async def generate_advice(profile: UserProfile, topics: Iterable[FinancialField]) -> AnalysisResult:
    """Ask the advice backend for an analysis of ``profile`` covering ``topics``.

    Makes exactly one request. Every failure (missing key, transport, service
    error, unparseable or non-conforming reply) is raised as
    AdviceGenerationFailed; nothing partial is returned.
    """
    topics = set(topics)
    prompt = build_advice_prompt(profile, topics)
    logger.info("Requesting advice from %s for %d topic(s)", ADVICE_MODEL, len(topics))
    logger.debug("Advice prompt:\n%s", prompt)
    try:
        response = await query_model(prompt)
    except (openai.OpenAIError, RuntimeError) as exc:
        logger.error("Advice request failed: %s", exc)
        raise AdviceGenerationFailed(str(exc)) from exc

    text = extract_text(response)
    if not text:
        logger.error("Advice backend returned an empty reply")
        raise AdviceGenerationFailed("Advice backend returned an empty reply")
    try:
        result = parse_analysis(text)
    except PydanticValidationError as exc:
        logger.error("Advice reply did not match the analysis schema: %s", exc)
        raise AdviceGenerationFailed("Advice reply did not match the analysis schema") from exc

    logger.info("Received advice with %d suggestion(s)", len(result.suggestions))
    return result
