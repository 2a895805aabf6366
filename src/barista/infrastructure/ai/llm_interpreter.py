"""ConversationInterpreter backed by an OpenAI-compatible chat model.

The model is asked for a single JSON object holding the reply, the intent
and the extracted order.  Parsing is lenient about formatting (markdown
fences, unknown intents, out-of-range confidence) but a reply that is not
JSON at all is an InterpretationError.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import AsyncIterator
from typing import Any

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from barista.application.errors import InterpretationError
from barista.application.interpretation import (
    ConversationInterpreter,
    Intent,
    Interpretation,
    InterpretationRequest,
    OrderExtraction,
)
from barista.infrastructure.ai.prompts import build_system_prompt

logger = logging.getLogger(__name__)


class LLMConversationInterpreter(ConversationInterpreter):

    def __init__(self, llm: Any) -> None:
        self.llm = llm

    @classmethod
    def from_settings(cls, settings) -> LLMConversationInterpreter:
        llm = ChatOpenAI(
            model=settings.OPENAI_MODEL,
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL,
            temperature=settings.OPENAI_TEMPERATURE,
            max_tokens=settings.OPENAI_MAX_TOKENS,
        )
        return cls(llm)

    async def interpret(self, request: InterpretationRequest) -> Interpretation:
        response = await self.llm.ainvoke(_messages(request))
        return parse_interpretation(_content_text(response.content))

    async def stream(
        self, request: InterpretationRequest
    ) -> AsyncIterator[str | Interpretation]:
        """Stream the reply field of the JSON answer while the model writes it."""
        reply = _ReplyStream()
        async for chunk in self.llm.astream(_messages(request)):
            text = reply.feed(_content_text(chunk.content))
            if text:
                yield text
        yield parse_interpretation(reply.raw)


def _messages(request: InterpretationRequest) -> list:
    return [
        SystemMessage(
            content=build_system_prompt(
                request.candidates, request.order_summary, request.transcript
            )
        ),
        HumanMessage(content=request.message),
    ]


class _ReplyStream:
    """Incrementally decodes the "reply" string out of a partial JSON document.

    Escape sequences are only decoded once complete, so a chunk boundary
    falling inside one never yields broken text.
    """

    _REPLY_START = re.compile(r'"reply"\s*:\s*"')

    def __init__(self) -> None:
        self.raw = ""
        self._pos: int | None = None
        self._done = False

    def feed(self, piece: str) -> str:
        self.raw += piece
        if self._done:
            return ""
        if self._pos is None:
            match = self._REPLY_START.search(self.raw)
            if match is None:
                return ""
            self._pos = match.end()

        start = end = self._pos
        while end < len(self.raw):
            char = self.raw[end]
            if char == '"':
                self._done = True
                break
            if char == "\\":
                width = self._escape_width(end)
                if width is None:
                    break
                end += width
            else:
                end += 1
        self._pos = end + 1 if self._done else end
        if end == start:
            return ""
        try:
            return json.loads('"' + self.raw[start:end] + '"', strict=False)
        except json.JSONDecodeError as exc:
            raise InterpretationError(f"Model reply is not a valid JSON string: {exc}") from exc

    def _escape_width(self, index: int) -> int | None:
        """Length of the escape at ``index``, or None while it is incomplete."""
        available = len(self.raw) - index
        if available < 2:
            return None
        if self.raw[index + 1] != "u":
            return 2
        if available < 6:
            return None
        try:
            code = int(self.raw[index + 2:index + 6], 16)
        except ValueError:
            return 6
        # A high surrogate is only decodable together with its low half.
        if 0xD800 <= code <= 0xDBFF:
            return 12 if available >= 12 else None
        return 6


def parse_interpretation(text: str) -> Interpretation:
    try:
        data = json.loads(_clean_json_response(text))
    except json.JSONDecodeError as exc:
        logger.warning("Interpreter returned non-JSON output: %.200s", text)
        raise InterpretationError(f"Model output is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise InterpretationError("Model output must be a JSON object")

    reply = data.get("reply")
    if not isinstance(reply, str) or not reply.strip():
        raise InterpretationError("Model output has no reply text")

    actions = data.get("suggested_actions") or []
    return Interpretation(
        reply=reply.strip(),
        intent=Intent.from_label(data.get("intent")),
        extraction=_parse_extraction(data.get("extracted_order")),
        suggested_actions=[str(a) for a in actions if isinstance(a, str) and a.strip()],
    )


def _parse_extraction(raw: Any) -> OrderExtraction | None:
    if not isinstance(raw, dict):
        return None

    drink_name = raw.get("drink_name")
    if not isinstance(drink_name, str) or not drink_name.strip():
        drink_name = None

    quantity = raw.get("quantity")
    try:
        quantity = int(quantity) if quantity is not None else None
    except (TypeError, ValueError):
        quantity = None

    try:
        confidence = float(raw.get("confidence", 0.0))
    except (TypeError, ValueError):
        confidence = 0.0

    customizations = raw.get("customizations") or {}
    if not isinstance(customizations, dict):
        customizations = {}

    size = raw.get("size")
    return OrderExtraction(
        drink_name=drink_name.strip() if drink_name else None,
        size=size if isinstance(size, str) and size.strip() else None,
        quantity=quantity,
        customizations={
            str(k): str(v) for k, v in customizations.items() if v not in (None, "")
        },
        confidence=min(max(confidence, 0.0), 1.0),
    )


def _content_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    # Content-block lists: keep only the text parts.
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def _clean_json_response(text: str) -> str:
    """Removes markdown code blocks if the model adds them."""
    text = text.strip()
    if text.startswith("```"):
        text = re.sub(r"^```(json)?", "", text)
        text = re.sub(r"```$", "", text)
    return text.strip()
