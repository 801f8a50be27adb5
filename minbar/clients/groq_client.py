import json
import logging

from groq import AsyncGroq

from minbar.config import settings

logger = logging.getLogger(__name__)


class GroqClient:
    """Async wrapper around the official Groq SDK for structured output.

    Usage::

        groq = GroqClient()                                  # DEFAULT_MODEL from env
        data = await groq.chat_json(messages, CARDS_SCHEMA)  # parsed dict
    """

    def __init__(self, model: str | None = None, api_key: str | None = None) -> None:
        self._model = model or settings.default_model
        self._client = AsyncGroq(api_key=api_key or settings.groq_api_key)

    @property
    def model(self) -> str:
        return self._model

    async def chat_json(
        self,
        messages: list[dict],
        response_schema: dict,
        *,
        schema_name: str = "response",
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> dict:
        """Completion constrained by Groq's strict JSON Schema mode.

        *response_schema* must set ``"additionalProperties": false`` on every
        object and list all properties in ``"required"``.

        Returns the parsed JSON as a Python dict.
        """
        kwargs: dict = {
            "model": self._model,
            "messages": messages,
            "response_format": {
                "type": "json_schema",
                "json_schema": {
                    "name": schema_name,
                    "strict": True,
                    "schema": response_schema,
                },
            },
        }
        if temperature is not None:
            kwargs["temperature"] = temperature
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens

        resp = await self._client.chat.completions.create(**kwargs)
        content = resp.choices[0].message.content
        logger.debug("Groq %s returned %d chars", schema_name, len(content or ""))
        return json.loads(content)
