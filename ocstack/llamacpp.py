"""Chat provider for an OpenAI-compatible llama.cpp server."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import SplitResult, urlsplit

import requests

from ocstack.session import Message, Session
from ocstack.tools import Tool

LLAMA_PATH = "v1/chat/completions"


class ProviderError(Exception):
    """Raised when a model provider cannot be configured or queried."""


@dataclass
class LlamaMessage:
    role: str
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LlamaMessage:
        return cls(role=data.get("role") or "", content=data.get("content") or "")


@dataclass
class LlamaPayload:
    model: str
    messages: list[LlamaMessage] = field(default_factory=list)
    stream: bool = False
    tools: list[Tool] = field(default_factory=list)

    def to_json(self) -> bytes:
        """Encode the payload as the server expects it."""
        return json.dumps(
            {
                "model": self.model,
                "messages": [m.to_dict() for m in self.messages],
                "stream": self.stream,
                "tools": [t.to_dict() for t in self.tools],
            }
        ).encode()


@dataclass
class LlamaChoice:
    index: int = 0
    message: LlamaMessage = field(default_factory=lambda: LlamaMessage("", ""))
    finish_reason: str = ""


@dataclass
class LlamaUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class LlamaChatCompletion:
    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""
    system_fingerprint: str = ""
    choices: list[LlamaChoice] = field(default_factory=list)
    usage: LlamaUsage = field(default_factory=LlamaUsage)
    timings: dict[str, float] = field(default_factory=dict)


def to_llamacpp_tools(data: bytes | str) -> list[Tool]:
    """Decode a JSON array of tool descriptions."""
    try:
        raw = json.loads(data)
    except (ValueError, TypeError) as exc:
        raise ProviderError(f"invalid tools JSON: {exc}") from exc
    if raw is None:
        return []
    if not isinstance(raw, list) or not all(
        item is None or isinstance(item, dict) for item in raw
    ):
        raise ProviderError("invalid tools JSON: expected a list of objects")
    return [Tool.from_dict(item or {}) for item in raw]


def parse_completion(data: bytes | str) -> LlamaChatCompletion:
    """Decode a chat completion response."""
    try:
        raw = json.loads(data)
    except (ValueError, TypeError) as exc:
        raise ProviderError(f"invalid completion JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ProviderError("invalid completion JSON: expected an object")

    choices = [
        LlamaChoice(
            index=c.get("index") or 0,
            message=LlamaMessage.from_dict(c.get("message") or {}),
            finish_reason=c.get("finish_reason") or "",
        )
        for c in raw.get("choices") or []
    ]
    usage = raw.get("usage") or {}
    return LlamaChatCompletion(
        id=raw.get("id") or "",
        object=raw.get("object") or "",
        created=raw.get("created") or 0,
        model=raw.get("model") or "",
        system_fingerprint=raw.get("system_fingerprint") or "",
        choices=choices,
        usage=LlamaUsage(
            prompt_tokens=usage.get("prompt_tokens") or 0,
            completion_tokens=usage.get("completion_tokens") or 0,
            total_tokens=usage.get("total_tokens") or 0,
        ),
        timings=dict(raw.get("timings") or {}),
    )


class LlamaCppProvider:
    """Client for the chat completions endpoint of a llama.cpp server."""

    def __init__(self, url: SplitResult, http: requests.Session | None = None):
        self.url = url._replace(path=LLAMA_PATH)
        self._http = http if http is not None else requests.Session()

    @classmethod
    def from_environment(cls) -> LlamaCppProvider:
        """Build a provider from the LLAMA_HOST environment variable."""
        host = os.environ.get("LLAMA_HOST", "")
        if not host:
            raise ProviderError("Can't find LLAMA_HOST environment variable")
        try:
            url = urlsplit(host)
        except ValueError as exc:
            raise ProviderError("Malformed LLAMA baseURL") from exc
        return cls(url)

    def endpoint(self) -> str:
        """The full URL requests are posted to."""
        return f"{self.url.scheme}://{self.url.netloc}/{self.url.path}"

    def generate_chat(self, text: str, session: Session) -> str | None:
        """Send ``text`` to the model, print and record its answer, and return it."""
        if session.debug:
            print(f"[DEBUG] - Scheme: {self.url.scheme}")
            print(f"[DEBUG] - Host: {self.url.netloc}")
            print(f"[DEBUG] - Path: {self.url.path}")

        if not session.history.messages:
            session.update_context()

        tools = to_llamacpp_tools(session.tools)
        messages = [
            m.text for m in session.history if isinstance(m.text, LlamaMessage)
        ]
        messages.append(LlamaMessage(role="user", content=text))

        payload = LlamaPayload(
            model=session.model, messages=messages, stream=False, tools=tools
        )
        completion = parse_completion(self.request(payload, session))

        print("A :> ", end="")
        if not completion.choices:
            return None
        result = completion.choices[0].message.content
        print(result)
        session.update_history(Message(role="assistant", text=result))
        return result

    def request(self, payload: LlamaPayload, session: Session) -> bytes:
        """Post the payload and return the raw response body."""
        try:
            response = self._http.post(
                self.endpoint(),
                data=payload.to_json(),
                headers={"Accept": "application/json"},
            )
        except requests.RequestException as exc:
            raise ProviderError(f"httpd Request failed: {exc}") from exc
        if response.status_code != 200:
            raise ProviderError(f"unexpected status {response.status_code}")
        body = response.content
        if session.debug:
            print(f"[DEBUG] - JSON Response -> {body.decode(errors='replace')}")
        return body