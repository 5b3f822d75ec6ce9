import json
import subprocess
import sys
from unittest import mock

import pytest

from ocstack import tools
from ocstack.tools import FunctionCall, ToolError, ToolResult


def test_to_function_args_decodes_object():
    args = tools.to_function_args(b'{"name": "bob", "n": 2}')
    assert args == {"name": "bob", "n": 2}


@pytest.mark.parametrize("data", [b"not json", b"[1, 2]"])
def test_to_function_args_rejects_bad_input(data):
    with pytest.raises(ToolError, match="Can't unmarshal data"):
        tools.to_function_args(data)


def test_to_function_call_round_trip():
    payload = {"command": "get pods"}
    call = tools.to_function_call("oc", json.dumps(payload).encode())
    assert call.name == "oc"
    assert call.arguments == payload
    assert call.result == ""


def test_tool_from_dict_round_trip():
    raw = {
        "type": "function",
        "function": {
            "name": "oc",
            "description": "run oc",
            "parameters": {
                "type": "object",
                "required": ["command"],
                "properties": {"command": {"type": "string", "description": "args"}},
            },
        },
    }
    tool = tools.Tool.from_dict(raw)
    assert tool.function.parameters.required == ["command"]
    assert tool.to_dict() == raw


def test_get_registered_tools_merges_in_lexical_order(tmp_path):
    (tmp_path / "b.json").write_text(json.dumps([{"name": "b"}]))
    (tmp_path / "a.JSON").write_text(json.dumps([{"name": "a"}]))
    sub = tmp_path / "c"
    sub.mkdir()
    (sub / "d.json").write_text(json.dumps([{"name": "d"}, {"name": "e"}]))
    (tmp_path / "notes.txt").write_text("ignored")

    merged = json.loads(tools.get_registered_tools(tmp_path))
    assert [item["name"] for item in merged] == ["a", "b", "d", "e"]


def test_get_registered_tools_empty_dir_is_null(tmp_path):
    assert tools.get_registered_tools(tmp_path) == b"null"


def test_get_registered_tools_bad_json(tmp_path):
    (tmp_path / "x.json").write_text("{broken")
    with pytest.raises(ToolError, match="failed to parse JSON"):
        tools.get_registered_tools(tmp_path)


def test_get_registered_tools_missing_dir(tmp_path):
    with pytest.raises(ToolError):
        tools.get_registered_tools(tmp_path / "missing")


def test_tool_result_str():
    assert str(ToolResult(stdout="a", stderr="b")) == "out: a\nerr: b\n"


def test_exec_tool_success(capsys):
    result = tools.exec_tool(sys.executable, "-c print('hi')")
    assert result.stdout == "hi\n"
    assert result.exit_code == 0
    assert "hi" in capsys.readouterr().out


def test_exec_tool_failure_carries_exit_code():
    with pytest.raises(ToolError) as info:
        tools.exec_tool(sys.executable, "-c exit(3)")
    assert info.value.result.exit_code == 3
    assert "command failed with error" in str(info.value)


def test_exec_tool_missing_command():
    with pytest.raises(ToolError) as info:
        tools.exec_tool("no-such-command-for-ocstack-tests", "")
    assert info.value.result == ToolResult()


def test_get_kube_config(monkeypatch, tmp_path):
    monkeypatch.setenv("KUBECONFIG", str(tmp_path))
    assert tools.get_kube_config() == str(tmp_path)
    monkeypatch.delenv("KUBECONFIG")
    with pytest.raises(ToolError, match="KUBECONFIG env var is not set"):
        tools.get_kube_config()


def test_validate_tools_reports_missing_kubeconfig(monkeypatch, capsys):
    monkeypatch.delenv("KUBECONFIG", raising=False)
    errors = tools.validate_tools()
    assert len(errors) == 1
    assert "[WARN]: KUBECONFIG env var is not set" in capsys.readouterr().out


def test_validate_tools_ok(monkeypatch):
    monkeypatch.setenv("KUBECONFIG", "/tmp/kubeconfig")
    assert tools.validate_tools() == []


def test_exit_on_errors(monkeypatch):
    monkeypatch.delenv("KUBECONFIG", raising=False)
    with pytest.raises(SystemExit) as info:
        tools.exit_on_errors()
    assert info.value.code == 1


def test_hello():
    assert tools.hello({"name": "world"}) == "Hello world\n"


def test_oc_runs_call_name_with_command():
    call = FunctionCall(name=sys.executable, arguments={"command": "-c print('x')"})
    assert tools.oc(call) == "out: x\n\nerr: \n"


def test_oc_failure_still_returns_output():
    call = FunctionCall(name=sys.executable, arguments={"command": "-c exit(2)"})
    assert tools.oc(call) == "out: \nerr: \n"


def _completed(argv):
    return subprocess.CompletedProcess(argv, 0, stdout="ok", stderr="")


def test_ctlplane_command():
    with mock.patch("ocstack.tools.subprocess.run", side_effect=lambda argv, **kw: _completed(argv)) as run:
        out = tools.ctlplane(FunctionCall(name="get_openstack_control_plane"))
    assert run.call_args.args[0] == ["oc", "-n", "openstack", "get", "oscp"]
    assert out == "out: ok\nerr: \n"


def test_check_svc_command():
    call = FunctionCall(name="check_openstack_svc", arguments={"service": "glance"})
    with mock.patch("ocstack.tools.subprocess.run", side_effect=lambda argv, **kw: _completed(argv)) as run:
        out = tools.check_svc(call)
    assert run.call_args.args[0] == ["oc", "-n", "openstack", "get", "glance"]
    assert out == "out: ok\nerr: \n"


def test_check_svc_non_string_service_is_dropped():
    call = FunctionCall(name="check_openstack_svc", arguments={"service": 5})
    with mock.patch("ocstack.tools.subprocess.run", side_effect=lambda argv, **kw: _completed(argv)) as run:
        out = tools.check_svc(call)
    assert run.call_args.args[0] == ["oc", "-n", "openstack", "get"]
    assert out == "out: ok\nerr: \n"