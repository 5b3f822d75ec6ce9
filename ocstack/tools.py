"""Tool descriptions, tool discovery and the local tools the model may call."""

from __future__ import annotations

import json
import os
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ocstack.term import show_warn

LOCAL_TOOLS = "tools/local"


class ToolError(Exception):
    """Raised when a tool cannot be loaded, parsed or run.

    When raised by a command execution, ``result`` holds what was collected.
    """

    def __init__(self, message: str, result: ToolResult | None = None):
        super().__init__(message)
        self.result = result


@dataclass
class Properties:
    type: str = ""
    description: str = ""
    enum: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Properties:
        return cls(
            type=data.get("type") or "",
            description=data.get("description") or "",
            enum=list(data.get("enum") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.type:
            out["type"] = self.type
        if self.description:
            out["description"] = self.description
        if self.enum:
            out["enum"] = list(self.enum)
        return out


@dataclass
class Parameters:
    type: str = ""
    required: list[str] = field(default_factory=list)
    properties: dict[str, Properties] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Parameters:
        props = data.get("properties") or {}
        return cls(
            type=data.get("type") or "",
            required=list(data.get("required") or []),
            properties={k: Properties.from_dict(v or {}) for k, v in props.items()},
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.type:
            out["type"] = self.type
        if self.required:
            out["required"] = list(self.required)
        if self.properties:
            out["properties"] = {k: v.to_dict() for k, v in self.properties.items()}
        return out


@dataclass
class Function:
    name: str = ""
    description: str = ""
    parameters: Parameters | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Function:
        params = data.get("parameters")
        return cls(
            name=data.get("name") or "",
            description=data.get("description") or "",
            parameters=Parameters.from_dict(params) if params is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.name:
            out["name"] = self.name
        if self.description:
            out["description"] = self.description
        if self.parameters is not None:
            out["parameters"] = self.parameters.to_dict()
        return out


@dataclass
class Tool:
    type: str = ""
    function: Function | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Tool:
        func = data.get("function")
        return cls(
            type=data.get("type") or "",
            function=Function.from_dict(func) if func is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "function": self.function.to_dict() if self.function is not None else None,
        }


@dataclass
class FunctionCall:
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    result: str = ""


@dataclass
class ToolResult:
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0

    def __str__(self) -> str:
        return f"out: {self.stdout}\nerr: {self.stderr}\n"


def to_function_args(data: bytes | str) -> dict[str, Any]:
    """Decode a JSON object of function arguments."""
    try:
        args = json.loads(data)
    except (ValueError, TypeError) as exc:
        raise ToolError("Can't unmarshal data") from exc
    if args is None:
        return {}
    if not isinstance(args, dict):
        raise ToolError("Can't unmarshal data")
    return args


def to_function_call(name: str, data: bytes | str) -> FunctionCall:
    """Build a function call from a name and JSON-encoded arguments."""
    return FunctionCall(name=name, arguments=to_function_args(data))


def _walk_lexical(path: Path):
    """Yield files under ``path`` depth-first, entries sorted by name."""
    if not path.is_dir():
        yield path
        return
    for entry in sorted(path.iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            yield from _walk_lexical(entry)
        else:
            yield entry


def get_registered_tools(dir_path: str | os.PathLike) -> bytes:
    """Merge the tool lists of every JSON file under ``dir_path`` into one JSON array."""
    root = Path(dir_path)
    if not root.exists():
        raise ToolError(f"lstat {root}: no such file or directory")

    all_tools: list[dict[str, Any]] = []
    for path in _walk_lexical(root):
        if not path.name.lower().endswith(".json"):
            continue
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise ToolError(f"failed to read file {path}: {exc}") from exc
        try:
            tools = json.loads(data)
        except ValueError as exc:
            raise ToolError(f"failed to parse JSON from {path}: {exc}") from exc
        if tools is None:
            continue
        if not isinstance(tools, list) or not all(
            item is None or isinstance(item, dict) for item in tools
        ):
            raise ToolError(f"failed to parse JSON from {path}: expected a list of objects")
        all_tools.extend(tools)

    merged = all_tools if all_tools else None
    return json.dumps(merged, sort_keys=True, separators=(",", ":")).encode()


def register_tools() -> bytes:
    """Load the tools shipped in the local tools directory."""
    return get_registered_tools(LOCAL_TOOLS)


def exec_tool(command: str, args: str) -> ToolResult:
    """Run ``command`` with whitespace-separated ``args`` and collect its output.

    Raises ToolError, carrying the partial result, if the command fails.
    """
    argv = [command, *args.split()]
    try:
        proc = subprocess.run(argv, capture_output=True, text=True)
    except OSError as exc:
        raise ToolError(f"command failed with error: {exc}", ToolResult()) from exc

    result = ToolResult(stdout=proc.stdout, stderr=proc.stderr)
    if proc.returncode != 0:
        result.exit_code = proc.returncode if proc.returncode > 0 else -1
        status = (
            f"exit status {proc.returncode}"
            if proc.returncode > 0
            else f"signal: {-proc.returncode}"
        )
        raise ToolError(f"command failed with error: {status}", result)

    print(result.stdout)
    return result


def _run_collecting(command: str, args: str) -> ToolResult:
    try:
        return exec_tool(command, args)
    except ToolError as exc:
        return exc.result if exc.result is not None else ToolResult()


def get_kube_config() -> str:
    """Return the path named by KUBECONFIG."""
    path = os.environ.get("KUBECONFIG", "")
    if not path:
        raise ToolError("KUBECONFIG env var is not set")
    return path


def validate_tools() -> list[ToolError]:
    """Check what the tools need to run, warning about and returning every problem."""
    errors: list[ToolError] = []
    try:
        get_kube_config()
    except ToolError as exc:
        show_warn(f"[WARN]: {exc}\n")
        errors.append(exc)
    return errors


def exit_on_errors() -> None:
    """Exit with status 1 if the tool prerequisites are not met."""
    if validate_tools():
        sys.exit(1)


def hello(args: dict[str, Any]) -> str:
    """Greet the given name; used to check that the model can call functions."""
    return f"Hello {args.get('name')}\n"


def _unpack_args(key: str, args: dict[str, Any]) -> str:
    value = args.get(key)
    return value if isinstance(value, str) else ""


def oc(call: FunctionCall) -> str:
    """Run the OpenShift client with the call's ``command`` argument."""
    return str(_run_collecting(call.name, _unpack_args("command", call.arguments)))


def ctlplane(call: FunctionCall) -> str:
    """Show the OpenStack control plane resources."""
    return str(_run_collecting("oc", "-n openstack get oscp"))


def check_svc(call: FunctionCall) -> str:
    """Show the resources of the call's ``service`` argument in the openstack namespace."""
    service = _unpack_args("service", call.arguments)
    return str(_run_collecting("oc", f"-n openstack get {service}"))