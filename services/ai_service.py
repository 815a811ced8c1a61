import json
import logging
import math
import re


logger = logging.getLogger(__name__)

_FENCE_START_JSON = re.compile(r"^```json\s*", re.IGNORECASE)
_FENCE_START = re.compile(r"^```\s*")
_FENCE_END = re.compile(r"```\s*$")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class AIServiceError(Exception):
    """Base error for the text generation collaborator."""


class TextGenerationError(AIServiceError):
    """The model API was unreachable, misconfigured, or returned nothing usable."""


class MalformedAIOutputError(AIServiceError):
    """The model answered, but not with the JSON object that was asked for."""


def _extract_response_text(response) -> str:
    # Prefer direct text field if present.
    text = (getattr(response, "text", "") or "").strip()
    if text:
        return text
    # Fallback: join candidate parts.
    candidates = getattr(response, "candidates", None) or []
    parts = []
    for candidate in candidates:
        content = getattr(candidate, "content", None)
        candidate_parts = getattr(content, "parts", None) or []
        for part in candidate_parts:
            value = getattr(part, "text", "") or ""
            if value:
                parts.append(value.strip())
    return "\n".join(parts).strip()


def _to_gemini_contents(messages):
    # Gemini takes system prompts separately and calls the assistant "model".
    system_parts = []
    contents = []
    for message in messages:
        role = message.get("role", "user")
        text = message.get("content", "") or ""
        if role == "system":
            system_parts.append(text)
            continue
        contents.append(
            {
                "role": "model" if role == "assistant" else "user",
                "parts": [{"text": text}],
            }
        )
    return "\n\n".join(system_parts), contents


class GeminiTextGenerator:
    """Chat-style text generation backed by the google-genai SDK.

    Built once by ``create_app`` and handed to the services that need it.
    """

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash", temperature: float = 0.7,
                 max_output_tokens: int = 1024):
        self.api_key = (api_key or "").strip()
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self._client = None

    def _get_client(self):
        if self._client is None:
            # Lazy import so app can start without the Gemini package configured.
            from google import genai

            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def generate(self, messages, json_mode: bool = False) -> str:
        if not self.api_key:
            raise TextGenerationError("GEMINI_API_KEY is not set.")

        system_instruction, contents = _to_gemini_contents(messages)
        config = {
            "temperature": self.temperature,
            "max_output_tokens": self.max_output_tokens,
        }
        if system_instruction:
            config["system_instruction"] = system_instruction
        if json_mode:
            config["response_mime_type"] = "application/json"

        try:
            response = self._get_client().models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
        except Exception as exc:
            logger.warning("Gemini request failed: %s", exc)
            raise TextGenerationError(f"Gemini request failed: {exc}") from exc

        text = _extract_response_text(response)
        if not text:
            raise TextGenerationError("Gemini returned an empty response.")
        return text


def extract_json_object(raw: str) -> dict:
    """Pull the first brace-delimited JSON object out of model output."""
    cleaned = (raw or "").strip()
    cleaned = _FENCE_START_JSON.sub("", cleaned)
    cleaned = _FENCE_START.sub("", cleaned)
    cleaned = _FENCE_END.sub("", cleaned).strip()

    match = _JSON_OBJECT.search(cleaned)
    if not match:
        raise MalformedAIOutputError("No JSON object found in model response.")
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise MalformedAIOutputError(f"Model response is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise MalformedAIOutputError("Model response JSON is not an object.")
    return payload


def as_str_list(value) -> list[str]:
    # Models sometimes send a bare string where a list was asked for.
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if str(item).strip()]


def as_score(value, default: int = 0) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(number):
        return default
    score = int(round(number))
    return max(0, min(100, score))


def generate_json(generator, messages, required_fields=()) -> dict:
    """Ask the generator for a JSON object and check the fields we rely on."""
    raw = generator.generate(messages, json_mode=True)
    payload = extract_json_object(raw)
    missing = [name for name in required_fields if name not in payload]
    if missing:
        logger.warning("Model JSON missing fields %s. Raw text: %s", missing, raw[:500])
        raise MalformedAIOutputError(f"Model response is missing fields: {', '.join(missing)}")
    return payload
