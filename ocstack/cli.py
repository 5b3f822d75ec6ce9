"""Interactive prompt that chats with the model and handles slash commands."""

from __future__ import annotations

import sys

from ocstack.llamacpp import ProviderError
from ocstack.ollama import QWEN
from ocstack.provider import OLLAMA_PROVIDER, get_provider
from ocstack.session import History, Session, new_session
from ocstack.templates import TemplateError, load_profile
from ocstack.term import show_warn, term_header, term_helper
from ocstack.tools import exit_on_errors, register_tools

DEBUG = True


def cli_command(query: str, session: Session | None) -> None:
    """Handle a slash command; ``query`` is the command line without the slash."""
    tokens = query.lower().split(" ")
    command = tokens[0]

    if command in ("exit", "quit"):
        print("Bye!")
        sys.exit(0)
    elif command == "read":
        print("Reading input from a workspace path is not available")
    elif command == "template":
        if len(tokens) < 2:
            term_helper(command)
            return
        if session is None:
            show_warn("No session")
            return
        try:
            profile = load_profile(tokens[1])
        except TemplateError as exc:
            show_warn(f"{exc}\n")
            return
        term_header(tokens[1])
        session.profile = profile
        session.update_context()
    elif command == "help":
        term_helper("")
    else:
        print("Default!")


def main(argv: list[str] | None = None) -> None:
    """Run the interactive prompt until the user quits or input ends."""
    exit_on_errors()

    client = get_provider(OLLAMA_PROVIDER)
    tools = register_tools()

    try:
        profile = load_profile("default")
    except TemplateError as exc:
        show_warn(f"{exc}\n")
        profile = ""

    session = new_session(QWEN, profile, History(), tools, DEBUG)
    term_header("default")

    while True:
        print("Q :> ", end="", flush=True)
        line = sys.stdin.readline()
        if not line:
            print("EOF", file=sys.stderr)
            sys.exit(1)

        if not line.removesuffix("\n"):
            continue

        if line.startswith("/"):
            cli_command(line.strip().removeprefix("/"), session)
            continue

        try:
            client.generate_chat(line, session)
        except ProviderError as exc:
            show_warn(str(exc))
        if session.debug:
            print("[HISTORY]:")
            print(session.history)
            print("----------")


if __name__ == "__main__":
    main()