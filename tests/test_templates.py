import pytest

from ocstack.templates import AgentParams, TemplateError, load_profile, render_exec
from ocstack.tools import FunctionCall


@pytest.fixture
def resources(tmp_path):
    (tmp_path / "default.tmpl").write_text(
        "Assistant.{% if use_tools %} Tools on.{% endif %}\n"
    )
    (tmp_path / "plain.tmpl").write_text("plain")
    return tmp_path


def test_agent_params_default():
    assert AgentParams().use_tools is True


def test_load_profile_renders_with_tools_enabled(resources):
    assert load_profile("default", resources) == "Assistant. Tools on.\n"


def test_load_profile_other_template(resources):
    assert load_profile("plain", resources) == "plain"


def test_load_profile_unknown_name(resources):
    with pytest.raises(TemplateError, match='no template "missing.tmpl"'):
        load_profile("missing", resources)


def test_load_profile_malformed_sibling(resources):
    (resources / "broken.tmpl").write_text("{% if %}")
    with pytest.raises(TemplateError, match="Malformed template"):
        load_profile("default", resources)


def test_load_profile_empty_dir(tmp_path):
    with pytest.raises(TemplateError, match="Malformed template"):
        load_profile("default", tmp_path)


def test_load_profile_undefined_variable(tmp_path):
    (tmp_path / "bad.tmpl").write_text("{{ nothing_here }}")
    with pytest.raises(TemplateError):
        load_profile("bad", tmp_path)


def test_render_exec(tmp_path):
    path = tmp_path / "execResult.tmpl"
    path.write_text("{{ name }} {{ arguments['service'] }} -> {{ result }}")
    call = FunctionCall(name="check", arguments={"service": "nova"}, result="ready")
    assert render_exec(call, path) == "check nova -> ready"


def test_render_exec_missing_file(tmp_path):
    with pytest.raises(TemplateError, match="Error parsing template file"):
        render_exec(FunctionCall(name="x"), tmp_path / "absent.tmpl")


def test_render_exec_undefined_field(tmp_path):
    path = tmp_path / "execResult.tmpl"
    path.write_text("{{ unknown }}")
    with pytest.raises(TemplateError, match="Error executing template"):
        render_exec(FunctionCall(name="x"), path)