"""Chat provider for an Ollama server."""

from __future__ import annotations

import json
import os
from typing import Any, Callable

import requests

from ocstack import tools as toolbox
from ocstack.llamacpp import ProviderError
from ocstack.session import History, Message, Session
from ocstack.templates import TemplateError, render_exec
from ocstack.tools import FunctionCall, ToolError

DEFAULT_MODEL = "gemma2:latest"
LLAMA = "llama3"
QWEN = "qwen2.5:1.5b"
QWEN3 = "qwen3:latest"

_DEFAULT_HOST = "127.0.0.1"
_DEFAULT_PORT = "11434"

_TOOL_HANDLERS: dict[str, Callable[[FunctionCall], str]] = {
    "hello": lambda call: toolbox.hello(call.arguments),
    "oc": toolbox.oc,
    "get_openstack_control_plane": toolbox.ctlplane,
    "check_openstack_svc": toolbox.check_svc,
}


def _ollama_host() -> str:
    """Resolve the server URL from OLLAMA_HOST, filling in defaults."""
    raw = os.environ.get("OLLAMA_HOST", "").strip()
    scheme, sep, hostport = raw.partition("://")
    port = _DEFAULT_PORT
    if not sep:
        scheme, hostport = "http", raw
    elif scheme == "http":
        port = "80"
    elif scheme == "https":
        port = "443"

    hostport, _, path = hostport.partition("/")
    host = _DEFAULT_HOST
    name, colon, maybe_port = hostport.rpartition(":")
    if colon and maybe_port.isdigit() and (name.startswith("[") or ":" not in name):
        host, port = name or host, maybe_port
    elif hostport:
        host = hostport

    host = host.strip("[]")
    if ":" in host:
        host = f"[{host}]"
    url = f"{scheme}://{host}:{port}"
    return f"{url}/{path}" if path else url


def to_ollama_tools(data: bytes | str) -> list[dict[str, Any]]:
    """Decode a JSON array of tool descriptions into request-ready objects."""
    try:
        raw = json.loads(data)
    except (ValueError, TypeError) as exc:
        raise ProviderError(f"invalid tools JSON: {exc}") from exc
    if raw is None:
        return []
    if not isinstance(raw, list) or not all(isinstance(item, dict) for item in raw):
        raise ProviderError("invalid tools JSON: expected a list of objects")
    return raw


def dispatch_tool(call: FunctionCall) -> str:
    """Run the local tool a call names, store its output in the call and return it.

    Calls to unknown tools leave the result untouched.
    """
    handler = _TOOL_HANDLERS.get(call.name)
    if handler is not None:
        call.result = handler(call)
    return call.result


class OllamaProvider:
    """Client for the chat and generate endpoints of an Ollama server."""

    def __init__(self, base_url: str, http: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self._http = http if http is not None else requests.Session()

    @classmethod
    def from_environment(cls) -> OllamaProvider:
        """Build a provider for the server named by OLLAMA_HOST."""
        return cls(_ollama_host())

    def models(self) -> list[str]:
        """List the available models; none are reported."""
        return []

    def _post(self, path: str, body: dict[str, Any]) -> requests.Response:
        try:
            response = self._http.post(f"{self.base_url}{path}", json=body)
        except requests.RequestException as exc:
            raise ProviderError(f"request failed: {exc}") from exc
        if response.status_code >= 400:
            try:
                detail = response.json().get("error") or response.reason
            except (ValueError, AttributeError):
                detail = response.text or response.reason
            raise ProviderError(f"{response.status_code}: {detail}")
        return response

    def generate(self, request: dict[str, Any], history: History | None = None) -> None:
        """Run a completion, printing each response chunk and recording it in ``history``.

        Failures of the server are not reported.
        """
        try:
            response = self._post("/api/generate", request)
        except ProviderError:
            return None
        for line in response.text.splitlines():
            if not line.strip():
                continue
            try:
                chunk = json.loads(line)
            except ValueError:
                break
            text = chunk.get("response", "") if isinstance(chunk, dict) else ""
            print(text)
            if history is not None:
                history.messages.append(Message(role="user", text=text))
        return None

    def generate_chat(self, text: str, session: Session) -> str:
        """Send ``text`` to the model, run any tools it calls, and return its answer."""
        if not session.history.messages:
            session.update_context()

        messages = [m.text for m in session.history if isinstance(m.text, dict)]
        messages.append({"role": "user", "content": text})

        try:
            tools = to_ollama_tools(session.tools)
        except ProviderError as exc:
            raise ProviderError("Can't get tools") from exc

        body: dict[str, Any] = {
            "model": session.model,
            "messages": messages,
            "stream": False,
        }
        if tools:
            body["tools"] = tools

        response = self._post("/api/chat", body)
        try:
            reply = response.json()
        except ValueError as exc:
            raise ProviderError(f"invalid chat response: {exc}") from exc

        message = (reply.get("message") if isinstance(reply, dict) else None) or {}
        content = message.get("content") or ""
        tool_calls = message.get("tool_calls") or []

        print(f"A :> {content}")
        print(f"T :> {tool_calls}")
        session.update_history(Message(role="user", text=content))

        for tool_call in tool_calls:
            function = tool_call.get("function") or {}
            try:
                encoded = json.dumps(function.get("arguments"))
            except (TypeError, ValueError) as exc:
                raise ProviderError("Error marshaling args") from exc
            try:
                call = toolbox.to_function_call(function.get("name") or "", encoded)
            except ToolError as exc:
                raise ProviderError(str(exc)) from exc

            dispatch_tool(call)

            if session.debug:
                print("[DEBUG] |-> FunctionCall:")
                print(f"[DEBUG] |-->> {call.name}")
                print(f"[DEBUG] |-->> {call.arguments}")
                print(f"[DEBUG] | -->> {call.result}")

            try:
                prompt = render_exec(call)
            except TemplateError as exc:
                raise ProviderError(str(exc)) from exc
            try:
                self.generate_chat(prompt, session)
            except ProviderError:
                pass

        return content