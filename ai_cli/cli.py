#!/usr/bin/env python3

import argparse
import argcomplete
import logging
import sys

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional

from rich.console import Console
from rich.logging import RichHandler

from .ai import (
    AICliError,
    Configuration,
    OneMinClient,
    Session,
    configure_api_key,
    get_secret,
)
from .ai.config import (
    DEFAULT_IMAGE_MODEL,
    DEFAULT_IMAGE_QUALITY,
    DEFAULT_IMAGE_SIZE,
    DEFAULT_IMAGE_STYLE,
    DEFAULT_MODEL,
    IMAGE_QUALITIES,
    IMAGE_SIZES,
    IMAGE_STYLES,
    MAX_WORDS,
    MODELS,
)


PROG = "ai-cli"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

_available_commands: List["Command"] = []


@dataclass
class Argument(ABC):
    def __init__(self, help: str, kwargs: Optional[dict] = None):
        self.help = help
        self.kwargs = kwargs if kwargs is not None else {}

    @abstractmethod
    def add_to_parser(self, parser: argparse.ArgumentParser):
        pass


class OptionalArg(Argument):
    def __init__(
        self,
        short_option: Optional[str],
        long_option: str,
        help: str,
        kwargs: Optional[dict] = None,
    ):
        super().__init__(help=help, kwargs=kwargs)
        self.short_option = short_option
        self.long_option = long_option

    def add_to_parser(self, parser: argparse.ArgumentParser):
        options = [o for o in (self.short_option, self.long_option) if o]
        parser.add_argument(*options, help=self.help, **self.kwargs)


class PositionalArg(Argument):
    def __init__(self, name: str, help: str, kwargs: Optional[dict] = None):
        super().__init__(help=help, kwargs=kwargs)
        self.name = name

    def add_to_parser(self, parser: argparse.ArgumentParser):
        parser.add_argument(self.name, help=self.help, **self.kwargs)


@dataclass
class Command:
    name: str
    func: Callable
    help: str
    description: str
    args: list[Argument]


LOG_LEVEL_ARG = OptionalArg(
    short_option=None,
    long_option="--log-level",
    help="Logging verbosity on stderr.",
    kwargs={"default": "WARNING", "choices": LOG_LEVELS, "type": str.upper},
)

PROMPT_ARGS: List[Argument] = [
    PositionalArg(
        name="prompt",
        help="The prompt to send to the AI.",
        kwargs={"nargs": "?"},
    ),
    OptionalArg(
        short_option="-i",
        long_option="--interactive",
        help="Keep the conversation going, reading one prompt per line.",
        kwargs={"action": "store_true"},
    ),
    OptionalArg(
        short_option="-v",
        long_option="--voice-output",
        help="Read the AI responses aloud.",
        kwargs={"action": "store_true"},
    ),
    OptionalArg(
        short_option="-q",
        long_option="--quiet",
        help="Do not print AI responses (only works with voice output).",
        kwargs={"action": "store_true"},
    ),
    OptionalArg(
        short_option="-m",
        long_option="--model",
        help=f"The AI model to use for chat. Image generation always uses {DEFAULT_IMAGE_MODEL}.",
        kwargs={"default": DEFAULT_MODEL, "choices": MODELS},
    ),
    OptionalArg(
        short_option="-w",
        long_option="--words",
        help="Maximum number of words in the response.",
        kwargs={"default": MAX_WORDS, "type": int},
    ),
    OptionalArg(
        short_option=None,
        long_option="--web-search",
        help="Let the AI search the web before answering.",
        kwargs={"action": "store_true"},
    ),
    OptionalArg(
        short_option="-g",
        long_option="--image-generation",
        help="Generate an image from the prompt (incompatible with interactive and voice modes).",
        kwargs={"action": "store_true"},
    ),
    OptionalArg(
        short_option="-s",
        long_option="--size",
        help="Image size.",
        kwargs={"default": DEFAULT_IMAGE_SIZE, "choices": IMAGE_SIZES},
    ),
    OptionalArg(
        short_option=None,
        long_option="--quality",
        help="Image quality.",
        kwargs={"default": DEFAULT_IMAGE_QUALITY, "choices": IMAGE_QUALITIES},
    ),
    OptionalArg(
        short_option=None,
        long_option="--style",
        help="Image style.",
        kwargs={"default": DEFAULT_IMAGE_STYLE, "choices": IMAGE_STYLES},
    ),
    OptionalArg(
        short_option="-o",
        long_option="--output",
        help="Where to save the generated image. Defaults to the file name in the image URL.",
    ),
    LOG_LEVEL_ARG,
]


def command(args: List[Argument]):
    def decorator(func):
        if not func.__name__.startswith("handle_"):
            raise ValueError("Command handler must start with 'handle_'.")

        if not func.__doc__:
            raise ValueError(
                f"Command handler '{func.__name__}' must have a docstring for its help text."
            )

        command_name = func.__name__.split("_")[1]
        # Use the first line of the docstring as the help text and
        # the full docstring for the detailed description.
        help_text = func.__doc__.strip().split("\n")[0]
        _available_commands.append(
            Command(command_name, func, help_text, func.__doc__, args + [LOG_LEVEL_ARG])
        )
        return func

    return decorator


##############################################################################


@command([])
def handle_config(args):
    """Store your 1min.ai API key in the system keyring.
    The key is read by every later invocation; run this again to replace it.
    """
    configure_api_key()
    Console().print("API key saved successfully!")
    return 0


def handle_prompt(args) -> int:
    """Sends the prompt (or starts a conversation) and renders the answers."""
    config = to_configuration(args).validate()
    api_key = get_secret()
    with OneMinClient() as transport:
        return Session(config, api_key, transport).run()


##############################################################################


def to_configuration(args: argparse.Namespace) -> Configuration:
    return Configuration(
        prompt=args.prompt,
        interactive=args.interactive,
        voice_output=args.voice_output,
        quiet=args.quiet,
        model=args.model,
        words=args.words,
        web_search=args.web_search,
        image_generation=args.image_generation,
        size=args.size,
        quality=args.quality,
        style=args.style,
        output=args.output,
    )


def build_parser() -> argparse.ArgumentParser:
    commands = ", ".join(f"`{PROG} {cmd.name}` ({cmd.help})" for cmd in _available_commands)
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="CLI tool for interacting with the 1min.ai API.",
        epilog=f"Other commands: {commands}",
    )
    for arg in PROMPT_ARGS:
        arg.add_to_parser(parser)
    parser.set_defaults(func=handle_prompt)
    return parser


def _build_command_parser(command: Command) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=f"{PROG} {command.name}", description=command.description
    )
    for arg in command.args:
        arg.add_to_parser(parser)
    parser.set_defaults(func=command.func)
    return parser


def _configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def run_cli(argv: Optional[List[str]] = None):
    """
    Parses command-line arguments and runs the requested action.

    Args:
        argv: A list of strings representing the command-line arguments.
              If None, `sys.argv[1:]` is used.
    """
    argv = sys.argv[1:] if argv is None else list(argv)
    commands = {cmd.name: cmd for cmd in _available_commands}

    # A leading sub-command name wins over a prompt, like `ai-cli config`.
    if argv and argv[0] in commands:
        parser = _build_command_parser(commands[argv[0]])
        args = parser.parse_args(argv[1:])
    else:
        parser = build_parser()
        # Enable argument auto-completion.
        argcomplete.autocomplete(parser)
        args = parser.parse_args(argv)
        # Invalid option combinations are reported by the handler instead of the help.
        if not args.prompt and not args.interactive and not to_configuration(args).problems():
            parser.print_help()
            return

    _configure_logging(args.log_level)

    try:
        exit_code = args.func(args)
    except AICliError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


def main():
    """The main entry point for the command-line interface, called by the `ai-cli` script."""
    run_cli()


if __name__ == "__main__":
    main()
