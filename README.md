# ocstack

`ocstack` is an interactive terminal prompt for chatting with a locally
served model. Questions go to an Ollama server, and the model may call a
small set of local tools, such as the `oc` client, to inspect an OpenStack
control plane running on OpenShift. The tool output is fed back to the
model as a new prompt.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Requirements

- `KUBECONFIG` must be set. `ocstack` warns and exits with status 1 at
  start-up when it is not.
- An Ollama server named by `OLLAMA_HOST`. When the variable is unset the
  server at `http://127.0.0.1:11434` is used; a scheme, port or path that
  is left out is filled in.
- The `oc` command on `PATH` for the OpenShift tools.
- In the working directory:
  - tool definitions as JSON files (each a JSON array of tool objects)
    anywhere under `tools/local`;
  - agent profiles as `*.tmpl` files in `template/resources`, with
    `default.tmpl` loaded at start-up;
  - `template/resources/execResult.tmpl`, used to turn a tool's output
    into the next prompt. It sees `name`, `arguments` and `result`.

Templates are Jinja2 templates. Profile templates are rendered with
`use_tools` set to true.

## Usage

Start the interactive prompt:

```
ocstack
```

Type a question at the `Q :>` prompt; the answer is printed after `A :>`
and any tool calls after `T :>`. The prompt uses the `qwen2.5:1.5b` model
and runs with debug output on, so the session history is printed after
every answer. Tools the model can call:

- `hello` returns a greeting for the `name` argument
- `oc` runs `oc` with the words of the `command` argument
- `get_openstack_control_plane` runs `oc -n openstack get oscp`
- `check_openstack_svc` runs `oc -n openstack get <service>`

Commands start with a slash:

- `/help` lists the available commands
- `/template <profile>` loads `<profile>.tmpl` and records it as a new
  system message in the session
- `/quit` or `/exit` leaves the prompt

Any other command prints `Default!`. The prompt exits with status 1 when
standard input ends.

## Library use

```python
from ocstack.provider import get_provider
from ocstack.session import History, new_session
from ocstack.templates import load_profile
from ocstack.tools import register_tools

client = get_provider("ollama")
session = new_session("qwen2.5:1.5b", load_profile("default"), History(), register_tools(), False)
client.generate_chat("Which OpenStack services are running?", session)
```

- `ocstack.provider.get_provider` accepts `"ollama"` or `"llama"` and
  returns `None` for any other name. The `"llama"` provider
  (`ocstack.llamacpp.LlamaCppProvider`) posts to
  `<LLAMA_HOST>/v1/chat/completions` on an OpenAI-compatible chat
  completions server and needs `LLAMA_HOST` to be set; it does not run
  tools.
- `ocstack.tools.exec_tool` runs a command and returns a `ToolResult`
  with its output and exit code, raising `ToolError` (carrying the partial
  result) when the command fails.
- `ocstack.tools.get_registered_tools` merges the JSON tool files under a
  directory into one JSON array.
- Provider failures raise `ocstack.llamacpp.ProviderError`; template
  failures raise `ocstack.templates.TemplateError`.

## Limitations

- Sessions are kept in memory only: `Session.save_session` returns a copy
  and `Session.load_session` a blank session; nothing is written to disk.
- The `/read` command only reports that reading from a workspace is not
  available.
- `OllamaProvider.models` always returns an empty list.
- Responses are not streamed; each answer is printed once it is complete.