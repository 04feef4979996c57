"""Intent schema and parser for the classifier's reply."""

import json
import logging
import re
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from travel_assistant.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

NO_TOOL = "none"

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")


class ToolIntent(BaseModel):
    """Run one registered tool with a raw parameter string."""
    kind: Literal["tool"] = "tool"
    tool: str = Field(description="Registered tool name")
    params: str = Field(default="", description="Tool-specific delimited parameters")


class NoToolIntent(BaseModel):
    """No tool applies; answer as a general travel consultation."""
    kind: Literal["none"] = "none"


Intent = Annotated[Union[ToolIntent, NoToolIntent], Field(discriminator="kind")]

_intent_adapter = TypeAdapter(Intent)


class ClassifierDecision(BaseModel):
    """JSON object the classifier prompt asks for."""
    tool: str
    params: str = ""

    @field_validator("params", mode="before")
    @classmethod
    def _coerce_params(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return ",".join(str(part) for part in value)
        return str(value)


def _strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text.strip()).strip()


def _balanced_block(text: str, start: int) -> Optional[str]:
    """Return the balanced `{...}` block opening at `start`, if it closes."""
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        ch = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]
    return None


def _first_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Decode the first balanced `{...}` block in `text` that is a JSON object.

    Prose braces before the real object are skipped.
    """
    start = text.find("{")
    while start != -1:
        block = _balanced_block(text, start)
        if block is not None:
            try:
                data = json.loads(block)
            except json.JSONDecodeError as e:
                logger.debug(f"Skipping non-JSON block at {start}: {e}")
            else:
                if isinstance(data, dict):
                    return data
        start = text.find("{", start + 1)
    return None


def _from_json(text: str, registry: ToolRegistry) -> Optional[Union[ToolIntent, NoToolIntent]]:
    data = _first_json_object(text)
    if data is None:
        if "{" in text:
            logger.warning("Classifier reply has braces but no decodable JSON object")
        return None

    try:
        if "kind" in data:
            intent = _intent_adapter.validate_python(data)
        else:
            decision = ClassifierDecision.model_validate(data)
            tool = decision.tool.strip().lower()
            if tool in ("", NO_TOOL):
                return NoToolIntent()
            intent = ToolIntent(tool=tool, params=decision.params.strip())
    except ValidationError as e:
        logger.warning(f"Classifier JSON does not match the intent schema: {e}")
        return None

    if isinstance(intent, ToolIntent):
        intent.tool = intent.tool.strip().lower()
        if intent.tool not in registry:
            logger.info(f"Classifier chose unknown tool '{intent.tool}'")
            return NoToolIntent()
    return intent


def _from_prefix(text: str, registry: ToolRegistry) -> Union[ToolIntent, NoToolIntent]:
    """Match the legacy one-line `tool:params` form in registry order."""
    line = next((line.strip() for line in text.splitlines() if line.strip()), "")
    lowered = line.lower()
    for name in registry.names:
        prefix = f"{name}:"
        if lowered.startswith(prefix):
            return ToolIntent(tool=name, params=line[len(prefix):].strip())
    return NoToolIntent()


def parse_intent(text: Optional[str], registry: ToolRegistry) -> Union[ToolIntent, NoToolIntent]:
    """Turn the classifier's raw reply into a typed intent.

    Tries a JSON object first, then the `tool:params` line form. Unknown
    tools and unparseable replies become `NoToolIntent`; this never raises.

    Args:
        text (Optional[str]): Raw classifier output.
        registry (ToolRegistry): Registered tools, in matching priority order.
    Returns:
        Union[ToolIntent, NoToolIntent]: The parsed intent.
    """
    if not text or not text.strip():
        return NoToolIntent()

    cleaned = _strip_code_fences(text)

    intent = _from_json(cleaned, registry)
    if intent is not None:
        return intent

    return _from_prefix(cleaned, registry)
