"""Agent profile templates and rendering of tool execution results."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path

import jinja2

from ocstack.tools import FunctionCall

DEFAULT_RESOURCES = Path("template/resources")
EXEC_RESULT_TEMPLATE = DEFAULT_RESOURCES / "execResult.tmpl"
TEMPLATE_SUFFIX = ".tmpl"


class TemplateError(Exception):
    """Raised when a template cannot be found, parsed or rendered."""


@dataclass
class AgentParams:
    """Values made available to profile templates."""

    use_tools: bool = True


def _environment(loader: jinja2.BaseLoader | None = None) -> jinja2.Environment:
    return jinja2.Environment(
        loader=loader,
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )


def load_profile(
    template_name: str, resources_dir: str | Path = DEFAULT_RESOURCES
) -> str:
    """Render the profile ``<template_name>.tmpl`` found in ``resources_dir``.

    Every template in the directory is parsed first, so a malformed sibling
    is reported as well.
    """
    root = Path(resources_dir)
    files = sorted(root.glob(f"*{TEMPLATE_SUFFIX}")) if root.is_dir() else []
    if not files:
        raise TemplateError(
            f"Malformed template: pattern matches no files: {root}/*{TEMPLATE_SUFFIX}"
        )

    env = _environment(jinja2.FileSystemLoader(str(root)))
    templates: dict[str, jinja2.Template] = {}
    for path in files:
        try:
            templates[path.name] = env.get_template(path.name)
        except jinja2.TemplateSyntaxError as exc:
            raise TemplateError(f"Malformed template: {path.name}: {exc}") from exc

    name = f"{template_name}{TEMPLATE_SUFFIX}"
    template = templates.get(name)
    if template is None:
        raise TemplateError(f'no template "{name}" associated with profiles')
    try:
        return template.render(**asdict(AgentParams(use_tools=True)))
    except jinja2.TemplateError as exc:
        raise TemplateError(f"{name}: {exc}") from exc


def render_exec(
    call: FunctionCall, template_path: str | Path = EXEC_RESULT_TEMPLATE
) -> str:
    """Render the result of a function call into a prompt for the model."""
    try:
        source = Path(template_path).read_text()
        template = _environment().from_string(source)
    except (OSError, jinja2.TemplateSyntaxError) as exc:
        raise TemplateError(f"Error parsing template file: {exc}") from exc
    try:
        return template.render(
            name=call.name, arguments=call.arguments, result=call.result
        )
    except jinja2.TemplateError as exc:
        raise TemplateError(f"Error executing template: {exc}") from exc