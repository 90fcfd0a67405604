"""Main CLI application entry point."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt

from .. import config
from ..config import (
    ConfigurationError,
    OPENAI_KEY_SERVICE,
    OPENROUTER_KEY_SERVICE,
    SecureKeyManager,
    Settings,
    TTSProvider
)
from ..models.persona_profiles import DEFAULT_REGISTRY
from ..services.conversation import ConversationLoop, parse_exchange_count
from ..services.llm import create_completion_service
from ..services.player import create_player
from ..services.tts import create_tts_service
from ..services.turn_executor import TurnExecutor

app = typer.Typer()
console = Console()

logger = logging.getLogger(__name__)

def ask_topic() -> str:
    """Prompt until a non-blank topic is entered."""
    while True:
        topic = Prompt.ask("Enter an initial topic or prompt for the conversation", console=console)
        if topic and topic.strip():
            return topic.strip()
        console.print("[yellow]Please enter a topic.")

def ask_exchanges(default: int) -> int:
    raw = Prompt.ask(
        f"How many exchanges do you want the AIs to have? (default: {default})",
        default="",
        show_default=False,
        console=console
    )
    return parse_exchange_count(raw, default=default)

def setup_keys() -> None:
    """Interactive keyring setup for the API keys."""
    console.print("[bold]API Key Setup[/bold]")
    for label, service_name in (("OpenRouter", OPENROUTER_KEY_SERVICE), ("OpenAI", OPENAI_KEY_SERVICE)):
        console.print(f"\n[bold]{label} API Key[/bold]")
        if SecureKeyManager.get_key(service_name):
            console.print(f"{label} API key is already configured.")
            if Confirm.ask("Do you want to replace it?", console=console):
                SecureKeyManager.prompt_for_key(service_name, force_input=True)
        else:
            SecureKeyManager.prompt_for_key(service_name)
    console.print("\n[green]API key setup complete![/green]")

def build_loop(settings: Settings) -> ConversationLoop:
    """Wire the services described by the settings into a conversation loop."""
    llm = create_completion_service(
        provider=settings.llm_provider,
        model_name=settings.llm_model,
        api_key=settings.get_openrouter_api_key(),
        base_url=settings.openrouter_base_url,
        timeout=settings.llm_timeout
    )

    if settings.tts_provider == TTSProvider.GOOGLE:
        tts_service = create_tts_service(
            TTSProvider.GOOGLE,
            model_name=settings.tts_model,
            client_email=settings.google_client_email,
            private_key=settings.get_google_private_key()
        )
    else:
        tts_service = create_tts_service(
            settings.tts_provider,
            model_name=settings.tts_model,
            api_key=settings.get_openai_api_key()
        )

    executor = TurnExecutor(
        llm=llm,
        tts_service=tts_service,
        player=create_player(skip=settings.skip_audio_playback, console=console),
        paths=settings.paths,
        console=console,
        default_model=settings.llm_model
    )
    return ConversationLoop(
        executor=executor,
        audio_dir=settings.audio_dir,
        registry=DEFAULT_REGISTRY,
        console=console
    )

async def run_conversation(loop: ConversationLoop, topic: str, exchanges: int):
    loop.set_topic(topic)
    loop.set_exchanges(exchanges)
    try:
        return await loop.run()
    finally:
        await loop.executor.llm.close()

@app.command()
def main(
    topic: Optional[str] = typer.Argument(None, help="Initial topic (prompted when omitted)"),
    exchanges: Optional[int] = typer.Option(
        None, "--exchanges", "-n",
        help="Number of exchanges (prompted when omitted)"
    ),
    model: Optional[str] = typer.Option(
        None,
        help="Completion model to use (overrides .env setting)"
    ),
    tts: Optional[TTSProvider] = typer.Option(
        None,
        help="TTS provider to use (overrides .env setting)"
    ),
    skip_audio: bool = typer.Option(
        False,
        help="Save audio files without playing them"
    ),
    data_dir: Optional[Path] = typer.Option(
        None,
        help="Base directory for audio and logs (overrides SPAR_DIR)"
    ),
    debug: bool = typer.Option(
        False,
        help="Enable debug output"
    ),
    setup_keys_flag: bool = typer.Option(
        False, "--setup-keys",
        help="Run interactive API key setup before starting"
    )
):
    """Two AI personas argue about a topic, out loud."""
    overrides = {}
    if model:
        overrides["llm_model"] = model
    if tts:
        overrides["tts_provider"] = tts
    if skip_audio:
        overrides["skip_audio_playback"] = True
    if data_dir:
        overrides["spar_dir"] = data_dir

    settings = Settings(**overrides) if overrides else config.settings
    settings.setup_logging("DEBUG" if debug else None)

    if setup_keys_flag:
        setup_keys()

    console.print("=== AI ARGUMENT WITH VOICE ===")

    try:
        settings.validate_credentials()
    except ConfigurationError as e:
        console.print(f"[red]Error: {escape(str(e))}")
        raise typer.Exit(code=1)

    if settings.tts_provider == TTSProvider.GOOGLE:
        console.print(
            "Note: Make sure you have valid Google Cloud credentials set up for TTS to work"
        )

    try:
        loop = build_loop(settings)
        chosen_topic = topic.strip() if topic and topic.strip() else ask_topic()
        if exchanges is None:
            count = ask_exchanges(settings.default_exchanges)
        else:
            count = parse_exchange_count(str(exchanges), default=settings.default_exchanges)
        asyncio.run(run_conversation(loop, chosen_topic, count))
    except Exception as e:
        logger.exception("Conversation failed")
        console.print(f"[red]Error: {escape(str(e))}")
        raise typer.Exit(code=1)

if __name__ == "__main__":
    app()
