"""CLI entry point for aika"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from aika.config import Config
from aika.exceptions import AikaError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="aika",
    help="Ask hosted LLMs from the command line",
    add_completion=False,
)


def configure_logging(debug: bool):
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


def fail(error: Exception):
    err_console.print(f"[red]Error:[/red] {escape(str(error))}", highlight=False, soft_wrap=True)
    raise typer.Exit(1)


def _load_config(config_path: Optional[Path]) -> Config:
    try:
        return Config.load(config_path)
    except AikaError as e:
        fail(e)


def _create_provider(name: str, config: Config):
    from aika.provider import create_provider

    try:
        return create_provider(name, config)
    except AikaError as e:
        fail(e)


PROVIDER_OPTION = typer.Option("anthropic", "--provider", "-p", help="Provider to use (anthropic, openai, mistral)")
MODEL_OPTION = typer.Option(None, "--model", "-m", help="Model to use (defaults to the provider's configured model)")
CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Path to config.toml")
DEBUG_OPTION = typer.Option(False, "--debug", help="Enable debug logging")


@app.command()
def query(
    message: Optional[str] = typer.Argument(None, help="Message to send"),
    provider: str = PROVIDER_OPTION,
    model: Optional[str] = MODEL_OPTION,
    config_path: Optional[Path] = CONFIG_OPTION,
    input_name: Optional[str] = typer.Option(None, "--input", "-i", help="Configured input command to run"),
    cmd: Optional[str] = typer.Option(None, "--cmd", help="Shell command whose output is used as input"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="File whose contents are used as input"),
    directory: Optional[Path] = typer.Option(None, "--dir", "-d", help="Directory whose files are used as input"),
    template: Optional[str] = typer.Option(None, "--template", "-t", help="Configured prompt template"),
    path: Path = typer.Option(Path("."), "--path", help="Working directory for input commands"),
    stream: bool = typer.Option(False, "--stream/--no-stream", help="Stream the response as it arrives"),
    wrap: Optional[int] = typer.Option(None, "--wrap", "-w", help="Wrap the response at this width"),
    as_json: bool = typer.Option(False, "--json", help="Print the response as JSON"),
    debug: bool = DEBUG_OPTION,
):
    """Send a single prompt (non-interactive)"""
    from aika.input import command_from_config, get_command_output, read_directory, read_file, split_command
    from aika.output import format_response
    from aika.prompts import build_prompt

    configure_logging(debug)
    config = _load_config(config_path)

    try:
        body = None
        if input_name:
            body = get_command_output(command_from_config(config.get_input(input_name)), cwd=path)
        elif cmd:
            body = get_command_output(split_command(cmd), cwd=path)
        elif file:
            body = read_file(file)
        elif directory:
            body = read_directory(directory)
        prompt = build_prompt(config, message, template, body)
    except AikaError as e:
        fail(e)

    if not prompt.strip():
        fail(ValueError("No prompt given. Pass a message or use --input/--cmd/--file/--dir."))

    llm = _create_provider(provider, config)
    model_name = model or llm.model

    with llm:
        try:
            if stream:
                llm.query(model_name, prompt, streaming=True)
                print()
                return
            response = llm.query(model_name, prompt)
        except AikaError as e:
            fail(e)

    print(format_response(response, width=wrap, as_json=as_json, provider=llm.name, model=model_name))


@app.command("list-models")
def list_models(
    provider: str = PROVIDER_OPTION,
    config_path: Optional[Path] = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
):
    """List the models a provider offers"""
    configure_logging(debug)
    config = _load_config(config_path)
    llm = _create_provider(provider, config)

    with llm:
        try:
            llm.list_models(console)
        except AikaError as e:
            fail(e)


@app.command()
def repl(
    provider: str = PROVIDER_OPTION,
    model: Optional[str] = MODEL_OPTION,
    config_path: Optional[Path] = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
):
    """Start an interactive session"""
    from aika.repl import run_repl

    configure_logging(debug)
    config = _load_config(config_path)
    llm = _create_provider(provider, config)

    with llm:
        run_repl(llm, model=model, debug=debug)


@app.command()
def providers():
    """List the supported providers"""
    from aika.provider import available_providers

    for name in available_providers():
        console.print(name)


def main():
    app()


if __name__ == "__main__":
    main()
