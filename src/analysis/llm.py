"""Chat-model plumbing shared by the analysis stages.

Every stage asks for structured output first and falls back to a raw call
plus JSON extraction, since not every provider honours structured output.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Iterator, List, Protocol, Sequence, Type, TypeVar, TYPE_CHECKING

from pydantic import BaseModel, ValidationError

from core.config import Settings
from core.exceptions import ModelNotConfiguredError

if TYPE_CHECKING:
    from langchain_core.messages import BaseMessage

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_CODE_BLOCK_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


class ChatModelLike(Protocol):
    def with_structured_output(self, schema: type[BaseModel]) -> Any: ...
    def invoke(self, input: object) -> Any: ...


@dataclass(frozen=True)
class LLMConfig:
    model: str
    model_provider: str | None = None
    temperature: float | None = None
    timeout: float | None = None
    max_tokens: int | None = None
    max_retries: int | None = 2


def analysis_llm_config(settings: Settings, **overrides: Any) -> LLMConfig | None:
    """Config for the document-context and term stages, or None if unset."""
    values = {
        "model": settings.analysis_model,
        "model_provider": settings.analysis_model_provider,
        "temperature": settings.analysis_temperature,
        "timeout": settings.analysis_timeout,
        "max_tokens": settings.analysis_max_tokens,
        "max_retries": settings.analysis_max_retries,
    }
    return _config_from(values, overrides)


def visual_llm_config(settings: Settings, **overrides: Any) -> LLMConfig | None:
    """Config for slide region analysis, or None if unset."""
    values = {
        "model": settings.visual_model,
        "model_provider": settings.visual_model_provider,
        "temperature": settings.visual_temperature,
        "timeout": settings.visual_timeout,
        "max_tokens": settings.visual_max_tokens,
        "max_retries": settings.visual_max_retries,
    }
    return _config_from(values, overrides)


def _config_from(values: dict[str, Any], overrides: dict[str, Any]) -> LLMConfig | None:
    for key, value in overrides.items():
        if value is not None:
            values[key] = value
    if not values.get("model"):
        return None
    return LLMConfig(**values)


def init_chat_model(config: LLMConfig | None) -> ChatModelLike:
    if config is None:
        raise ModelNotConfiguredError(
            "No chat model configured; set ANALYSIS_MODEL or VISUAL_MODEL"
        )

    from langchain.chat_models import init_chat_model as _init

    kwargs: dict[str, Any] = {}
    if config.model_provider:
        kwargs["model_provider"] = config.model_provider
    if config.temperature is not None:
        kwargs["temperature"] = config.temperature
    if config.timeout is not None:
        kwargs["timeout"] = config.timeout
    if config.max_tokens is not None:
        kwargs["max_tokens"] = config.max_tokens
    if config.max_retries is not None:
        kwargs["max_retries"] = config.max_retries

    return _init(config.model, **kwargs)


def build_messages(system_prompt: str, user_content: str | List[dict]) -> "list[BaseMessage]":
    from langchain_core.messages import HumanMessage, SystemMessage

    return [SystemMessage(content=system_prompt), HumanMessage(content=user_content)]


def invoke_json_model(
    llm: ChatModelLike,
    messages: Sequence[Any],
    schema: Type[ModelT],
    *,
    label: str,
) -> ModelT:
    """Return the model's reply as ``schema``.

    Raises ValueError when the raw reply carries no JSON object matching the
    schema. Errors from the raw call itself propagate.
    """
    try:
        structured = llm.with_structured_output(schema)
        result = structured.invoke(messages)
        if isinstance(result, schema):
            return result
        if isinstance(result, dict):
            return schema.model_validate(result)
    except Exception as exc:
        logger.debug("%s: structured output unavailable (%s); using raw reply", label, exc)

    raw = llm.invoke(messages)
    return parse_json_response(response_text(raw), schema, label=label)


def response_text(raw: Any) -> str:
    content = getattr(raw, "content", raw)
    if isinstance(content, list):
        # Content-part replies: keep the text parts only.
        parts = [
            part.get("text", "") if isinstance(part, dict) else str(part)
            for part in content
        ]
        return "".join(parts)
    if not isinstance(content, str):
        return str(content)
    return content


def parse_json_response(text: str, schema: Type[ModelT], *, label: str) -> ModelT:
    if not text or not text.strip():
        raise ValueError(f"{label} returned an empty response")
    payload = extract_json_object(text)
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"{label} JSON did not match schema") from exc


def extract_json_object(text: str) -> dict[str, Any]:
    """Decode the first JSON object in ``text``, preferring fenced code blocks."""
    source = text or ""
    for block in _CODE_BLOCK_RE.findall(source):
        found = _first_object(block)
        if found is not None:
            return found

    found = _first_object(source)
    if found is not None:
        return found
    raise ValueError("No JSON object found in LLM response")


def _first_object(text: str) -> dict[str, Any] | None:
    decoder = json.JSONDecoder()
    for start in _brace_positions(text):
        try:
            value, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            continue
        if isinstance(value, dict):
            return value
    return None


def _brace_positions(text: str) -> Iterator[int]:
    idx = text.find("{")
    while idx != -1:
        yield idx
        idx = text.find("{", idx + 1)


__all__ = [
    "ChatModelLike",
    "LLMConfig",
    "analysis_llm_config",
    "build_messages",
    "extract_json_object",
    "init_chat_model",
    "invoke_json_model",
    "parse_json_response",
    "response_text",
    "visual_llm_config",
]
