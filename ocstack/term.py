"""Terminal output helpers: banners, help text and coloured warnings."""

MODEL = "gemma2"

RESET = "\033[0m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
MAGENTA = "\033[35m"
CYAN = "\033[36m"
GRAY = "\033[37m"
WHITE = "\033[97m"

_SEPARATOR = "----"

_COMMAND_USAGE = {
    "template": "Usage: /template <profile>",
}


def term_helper(cmd: str = "") -> None:
    """Print the list of commands, or the usage of a single command."""
    print(_SEPARATOR)
    if not cmd:
        print("Available Commands :> ")
        print("1. /quit ")
        print("2. /template ")
        print(_SEPARATOR)
        return
    usage = _COMMAND_USAGE.get(cmd)
    if usage is not None:
        print(usage)


def term_header(profile: str) -> None:
    """Print the greeting banner for the given agent profile."""
    print(_SEPARATOR)
    print("Hello, ocstack!")
    print(f"Agent profile: {profile}")
    print(_SEPARATOR)
    print("I :> Run /help to get a list of available commands")


def show_warn(message: str) -> None:
    """Print a message in red."""
    print(f"{RED}{message}{RESET}")