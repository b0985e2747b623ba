import json
import re

import anthropic
import openai
from pydantic import BaseModel, ValidationError

from flashcard_app.config import settings
from flashcard_app.services.errors import LanguageServiceError, ResponseSchemaError

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


async def _call_anthropic(
    prompt: str,
    system: str | None = None,
    image_b64: str | None = None,
    media_type: str = "image/jpeg",
    model: str | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
) -> str:
    client = anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key)
    content: list[dict] = []
    if image_b64:
        content.append(
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": media_type,
                    "data": image_b64,
                },
            }
        )
    content.append({"type": "text", "text": prompt})
    kwargs: dict = {
        "model": model or settings.llm_model_advanced,
        "max_tokens": max_tokens or settings.llm_max_tokens,
        "messages": [{"role": "user", "content": content}],
    }
    if system:
        kwargs["system"] = system
    if temperature is not None:
        kwargs["temperature"] = temperature
    message = await client.messages.create(**kwargs)
    return message.content[0].text


async def _call_openai(
    prompt: str,
    system: str | None = None,
    image_b64: str | None = None,
    media_type: str = "image/jpeg",
    model: str | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
    json_mode: bool = False,
) -> str:
    client = openai.AsyncOpenAI(api_key=settings.openai_api_key)
    messages: list[dict] = []
    if system:
        messages.append({"role": "system", "content": system})
    if image_b64:
        messages.append(
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {
                        "type": "image_url",
                        "image_url": {
                            "url": f"data:{media_type};base64,{image_b64}",
                            "detail": "high",
                        },
                    },
                ],
            }
        )
    else:
        messages.append({"role": "user", "content": prompt})
    kwargs: dict = {
        "model": model or settings.llm_model_advanced,
        "max_tokens": max_tokens or settings.llm_max_tokens,
        "messages": messages,
    }
    if temperature is not None:
        kwargs["temperature"] = temperature
    if json_mode:
        kwargs["response_format"] = {"type": "json_object"}
    response = await client.chat.completions.create(**kwargs)
    return response.choices[0].message.content or ""


class LanguageService:
    """Thin async facade over the configured LLM provider.

    Every pipeline stage receives an instance of this class instead of
    talking to an SDK directly, so tests can hand in a scripted double.
    """

    def __init__(self, provider: str | None = None):
        self.provider = provider or settings.llm_provider

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        json_mode: bool = False,
    ) -> str:
        return await self._call(
            prompt,
            system=system,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            json_mode=json_mode,
        )

    async def complete_vision(
        self,
        prompt: str,
        image_b64: str,
        media_type: str = "image/png",
        *,
        system: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        json_mode: bool = True,
    ) -> str:
        return await self._call(
            prompt,
            system=system,
            image_b64=image_b64,
            media_type=media_type,
            model=model or settings.llm_model_vision,
            max_tokens=max_tokens,
            json_mode=json_mode,
        )

    async def _call(self, prompt: str, json_mode: bool = False, **kwargs) -> str:
        try:
            if self.provider == "anthropic":
                return await _call_anthropic(prompt, **kwargs)
            return await _call_openai(prompt, json_mode=json_mode, **kwargs)
        except (openai.OpenAIError, anthropic.AnthropicError) as e:
            raise LanguageServiceError(f"{self.provider} request failed: {e}") from e


def get_language_service() -> LanguageService:
    return LanguageService()


def parse_json_response(text: str | None):
    """Decode a model reply as JSON, tolerating a surrounding markdown fence."""
    if not text or not text.strip():
        raise ResponseSchemaError("Language service returned an empty response")
    stripped = text.strip()
    match = _CODE_FENCE.match(stripped)
    if match:
        stripped = match.group(1)
    try:
        return json.loads(stripped)
    except json.JSONDecodeError as e:
        raise ResponseSchemaError(f"Language service returned invalid JSON: {e}") from e


def validate_payload(data, schema: type[BaseModel]):
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise ResponseSchemaError(
            f"Language service response does not match {schema.__name__}: {e}"
        ) from e
