"""
OpenAI Service - Estimator implementation using the OpenAI API.

Works against OpenAI or any OpenAI-compatible endpoint (Ollama, vLLM, gateways).
"""
from typing import Dict, Any, Optional
import json
import logging

from openai import OpenAI

from offer_engine.llm.interfaces import EstimatorProvider

logger = logging.getLogger(__name__)


def extract_json_object(text: str) -> Dict[str, Any]:
    """Return the first balanced ``{...}`` object found in *text*.

    Models often wrap JSON in prose or code fences, so the whole response is
    not required to be JSON. Braces inside string literals are ignored.

    Raises:
        ValueError: no balanced object is present or it does not decode to a dict
    """
    if not text:
        raise ValueError("Empty estimator response")

    start = text.find("{")
    if start < 0:
        raise ValueError("No JSON object in estimator response")

    depth = 0
    in_string = False
    escaped = False
    for idx in range(start, len(text)):
        ch = text[idx]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                try:
                    data = json.loads(text[start:idx + 1])
                except json.JSONDecodeError as e:
                    raise ValueError(f"Malformed JSON in estimator response: {e}") from e
                if not isinstance(data, dict):
                    raise ValueError("Estimator JSON is not an object")
                return data

    raise ValueError("Unbalanced JSON object in estimator response")


class OpenAIService(EstimatorProvider):
    """
    OpenAI Estimator Service.

    One request per call: the client is built with ``max_retries=0`` and a
    bounded timeout so a slow or failing model never holds up the caller.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: str = "gpt-4o-mini",
        timeout_seconds: float = 15.0,
    ):
        client_kwargs: Dict[str, Any] = {
            'timeout': timeout_seconds,
            'max_retries': 0,
        }
        if api_key:
            client_kwargs['api_key'] = api_key
        if base_url:
            client_kwargs['base_url'] = base_url

        self.client = OpenAI(**client_kwargs)
        self.model = model
        self.timeout_seconds = timeout_seconds

    def complete(
        self,
        prompt: str,
        *,
        max_tokens: int,
        temperature: float,
        system_prompt: Optional[str] = None,
    ) -> str:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature,
        )

        try:
            content = response.choices[0].message.content
        except (IndexError, AttributeError) as e:
            logger.error(f"Unexpected completion response shape: {e}")
            raise ValueError("Unexpected completion response shape") from e

        if not content:
            raise ValueError("Estimator returned no text content")

        logger.debug("Estimator (%s) responded with %d chars", self.model, len(content))
        return content
