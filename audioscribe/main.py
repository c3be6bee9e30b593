"""Main application entry point for audioscribe."""

import sys
import asyncio
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from pubsub import pub
from rich.console import Console
from rich.panel import Panel

from . import __version__
from .audio.audio_pub import FRAGMENT_TOPIC
from .audio.audio_saver import load_from_file, save_to_file
from .config import AudioscribeConfig
from .errors import AudioscribeError
from .models.derivation import DerivationResult, DerivationStatus
from .models.events import AudioFragmentEvent
from .services import SpeechSession

logger = logging.getLogger(__name__)


class Application:
    """Runs one record -> transcribe -> derive pass from the command line."""

    def __init__(self, config: AudioscribeConfig, console: Optional[Console] = None):
        self.config = config
        self.console = console or Console()
        self.session: Optional[SpeechSession] = None
        self._last_reported_second = -1

    def init(self, with_microphone: bool = True) -> None:
        logger.info("Initializing services...")
        self.session = SpeechSession.from_config(self.config, with_microphone=with_microphone)

    def _on_fragment(self, event: AudioFragmentEvent) -> None:
        stats = self.session.capture.get_recording_stats()
        if stats.elapsed_seconds != self._last_reported_second:
            self._last_reported_second = stats.elapsed_seconds
            self.console.print(
                f"● Recording... {stats.elapsed_seconds}s, {event.total_bytes} bytes, "
                f"level {event.peak_level:.0%}", style="red")

    async def record(self, duration: Optional[float], save_audio: Optional[str],
                     language: Optional[str]) -> None:
        capture = self.session.capture
        pub.subscribe(self._on_fragment, FRAGMENT_TOPIC)
        try:
            await self.session.start_recording()
            if duration:
                self.console.print(f"🎤 Recording for {duration:g} seconds...", style="blue")
                await asyncio.sleep(duration)
            else:
                loop = asyncio.get_running_loop()
                await loop.run_in_executor(None, input, "🎤 Recording. Press Enter to stop...\n")
            payload = await self.session.stop_recording()
        finally:
            pub.unsubscribe(self._on_fragment, FRAGMENT_TOPIC)

        if payload is None:
            return
        self.console.print(f"✅ Recorded {payload.size_bytes} bytes "
                           f"({payload.duration_seconds:.1f}s, {capture.total_fragments} fragments)",
                           style="green")
        if save_audio:
            save_to_file(payload, save_audio)
        await self.transcribe(payload, language)

    async def transcribe(self, payload, language: Optional[str]) -> None:
        with self.console.status("Transcribing..."):
            result = await self.session.submit_audio_for_transcription(payload, language)
        self.console.print(Panel(result.text, title=f"Transcript ({result.service}, {result.language})"))

    async def derive(self, translate_to: Optional[str], summary_type: Optional[str],
                     summary_language: Optional[str]) -> List[DerivationResult]:
        """Run the requested derivations concurrently; each one reports independently."""
        requests = []
        if translate_to:
            requests.append(self.session.request_translation(translate_to))
        if summary_type:
            requests.append(self.session.request_summary(summary_type, summary_language))
        if not requests:
            return []

        with self.console.status("Generating translation / summary..."):
            results = await asyncio.gather(*requests)

        for result in results:
            title = result.kind.value.capitalize()
            if result.status is DerivationStatus.SUCCEEDED:
                self.console.print(Panel(result.result_text, title=title))
            else:
                self.console.print(f"❌ {result.error_message}", style="red")
        return results

    async def cleanup(self) -> None:
        if self.session is not None:
            await self.session.close()


def setup_logging(config: AudioscribeConfig, level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    # Get log file path from config
    log_file_path = config.get('logging.file_path', 'data/logs/audioscribe.log')
    console_output = config.get('logging.console_output', True)

    # Create logs directory if it doesn't exist
    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    # Set up handlers
    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    file_handler.setFormatter(file_formatter)
    handlers.append(file_handler)

    # Console handler - only if enabled in config
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)  # Only show warnings and above on console
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    # Log startup
    logger.info("=" * 50)
    logger.info("audioscribe starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("=" * 50)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="audioscribe - record speech, transcribe, translate and summarize",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: built-in defaults and environment)"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: from config, else INFO)"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"audioscribe v{__version__}"
    )

    derive_args = argparse.ArgumentParser(add_help=False)
    derive_args.add_argument("--language", type=str, help="Transcription language (default: from config)")
    derive_args.add_argument("--translate", metavar="LANG", type=str,
                             help="Translate the transcript into LANG (e.g. en, es)")
    derive_args.add_argument("--summary", choices=["short", "medium", "detailed"],
                             help="Summarize the transcript at this detail level")
    derive_args.add_argument("--summary-language", type=str,
                             help="Language of the summary (default: from config)")

    commands = parser.add_subparsers(dest="command", required=True)

    record = commands.add_parser("record", parents=[derive_args],
                                 help="Record from the microphone and transcribe")
    record.add_argument("--duration", type=float,
                        help="Stop after this many seconds (default: wait for Enter)")
    record.add_argument("--save-audio", metavar="PATH", type=str,
                        help="Also save the recording as a WAV file")

    transcribe = commands.add_parser("transcribe-file", parents=[derive_args],
                                     help="Transcribe a 16-bit PCM WAV file")
    transcribe.add_argument("path", type=str, help="WAV file to transcribe")

    return parser


async def run(app: Application, args: argparse.Namespace) -> None:
    try:
        app.init(with_microphone=args.command == "record")
        if args.command == "record":
            await app.record(args.duration, args.save_audio, args.language)
        else:
            await app.transcribe(load_from_file(args.path), args.language)
        if app.session.state.has_transcript:
            await app.derive(args.translate, args.summary, args.summary_language)
    finally:
        await app.cleanup()


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for audioscribe."""
    args = build_parser().parse_args(argv)

    console = Console()
    try:
        config = AudioscribeConfig(args.config)
        level = args.log_level or config.get('logging.level', 'INFO')
        setup_logging(config, level)
        asyncio.run(run(Application(config, console), args))
    except KeyboardInterrupt:
        console.print("\n👋 Goodbye!")
    except AudioscribeError as e:
        console.print(f"❌ {e.user_message()}", style="red")
        sys.exit(1)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"❌ Error: {e}", style="red")
        logging.error(f"Application error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
