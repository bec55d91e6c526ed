"""
Command-line interface for nowplaying.

Commands:
- watch: Continuously sample the player and update the now-playing files
- once: Take a single sample, write the files and exit
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from . import __version__
from .config import Config
from .debug.trace import setup_logging
from .memory import ProcessAttacher, ProcessError, SongSampler, find_process
from .output.console import ConsoleRenderer
from .output.files import build_writers
from .runtime.control import CancelToken, install_signal_handlers
from .runtime.loop import PollLoop, persist
from .song import SongSnapshot

log = logging.getLogger(__name__)


def get_arg_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="nowplaying",
        description="Read now-playing info from the music player's memory and write it to files",
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        default="config.toml",
        help="Path to config file (default: config.toml)",
    )
    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        help="Enable debug output (detailed memory reads)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Silent mode (no console output)",
    )
    parser.add_argument(
        "--no-txt",
        action="store_true",
        help="Disable text file output",
    )
    parser.add_argument(
        "--no-json",
        action="store_true",
        help="Disable JSON file output",
    )
    parser.add_argument(
        "--txt-file",
        type=str,
        help="Text output filename",
    )
    parser.add_argument(
        "--json-file",
        type=str,
        help="JSON output filename",
    )
    parser.add_argument(
        "-i", "--interval",
        type=int,
        help="Update interval in milliseconds",
    )
    parser.add_argument(
        "-r", "--retries",
        type=int,
        help="Maximum retries",
    )
    parser.add_argument(
        "--process",
        type=str,
        help="Target process name",
    )
    parser.add_argument(
        "--module",
        type=str,
        help="Target module name",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Also write logs to this file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Watch command
    subparsers.add_parser(
        "watch",
        help="Continuously read the current song (default)",
    )

    # Once command
    subparsers.add_parser(
        "once",
        help="Read the current song once and exit",
    )

    return parser


def load_config(args: argparse.Namespace) -> Config:
    """Load the config file and apply command-line overrides."""
    config = Config.load(Path(args.config))
    return config.with_overrides(
        debug_mode=True if args.debug else None,
        output_txt=False if args.no_txt else None,
        output_json=False if args.no_json else None,
        txt_filename=args.txt_file,
        json_filename=args.json_file,
        update_interval_ms=args.interval,
        max_retries=args.retries,
        process_name=args.process,
        module_name=args.module,
    )


def open_target(config: Config) -> tuple[ProcessAttacher, int]:
    """
    Find the player process, open it read-only and locate the module.

    Raises ProcessError on any failure.
    """
    settings = config.settings
    log.info("Searching for %s...", settings.process_name)

    pid = find_process(settings.process_name)
    attacher = ProcessAttacher()
    try:
        attacher.attach(pid)
        base = attacher.get_base_address(settings.module_name)
    except ProcessError:
        attacher.detach()
        raise
    return attacher, base


def cmd_watch(args: argparse.Namespace, config: Config) -> int:
    """Run the continuous polling loop."""
    settings = config.settings
    try:
        attacher, base = open_target(config)
    except (ProcessError, OSError) as e:
        log.error("%s", e)
        return 1

    renderer = None
    if not args.quiet:
        renderer = ConsoleRenderer(
            bar_width=settings.progress_bar_width,
            show_lyrics=settings.show_lyrics,
            max_lyric_lines=settings.max_lyric_lines,
            debug=settings.debug_mode,
        )

    token = CancelToken()
    install_signal_handlers(token)

    with attacher:
        loop = PollLoop(
            SongSampler(attacher, base, config),
            token,
            interval=settings.interval_seconds,
            renderer=renderer,
            writers=build_writers(settings),
        )
        log.info("Start reading song info...")
        cycles = loop.run()

    log.info("Stopped after %d cycles", cycles)
    return 0


def cmd_once(args: argparse.Namespace, config: Config) -> int:
    """Take a single sample and write the files."""
    try:
        attacher, base = open_target(config)
    except (ProcessError, OSError) as e:
        log.error("%s", e)
        return 1

    with attacher:
        snapshot = SongSampler(attacher, base, config).sample()

    if snapshot.is_valid:
        if not args.quiet:
            print(f"🎵 Now playing: {snapshot.title}-{snapshot.artist} | {snapshot.album}")
    else:
        if not args.quiet:
            print("⏸️  No music playing or song title not found.")
        snapshot = SongSnapshot.placeholder()

    persist(snapshot, build_writers(config.settings))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = get_arg_parser()
    args = parser.parse_args(argv)

    if args.quiet:
        level = logging.ERROR
    elif args.debug:
        level = logging.DEBUG
    else:
        level = logging.INFO
    setup_logging(level, args.log_file)

    try:
        config = load_config(args)
    except ValidationError as e:
        log.error("Invalid command-line option: %s", e)
        return 1
    if config.settings.debug_mode and not args.quiet:
        setup_logging(logging.DEBUG, args.log_file)

    commands = {
        "watch": cmd_watch,
        "once": cmd_once,
    }

    cmd_func = commands.get(args.command or "watch")
    if cmd_func:
        return cmd_func(args, config)
    else:
        print(f"Unknown command: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
