#!/usr/bin/env python3

import argparse
import logging
import signal
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

from clipmod.clipboard import ClipboardSource, get_clipboard_source
from clipmod.config import AppConfig
from clipmod.database.history_file import HistoryFile
from clipmod.models.entry import ClipboardEntry
from clipmod.models.modifier import BUILTIN_MODIFIERS, ModifierScript, get_modifier
from clipmod.services.clipboard_service import ClipboardPoller
from clipmod.services.history_service import HistoryStore
from clipmod.services.notification_service import HistoryChanged, NotificationBus
from clipmod.services.transform_service import TransformEngine
from clipmod.utils.formatting import format_elapsed, preview

logger = logging.getLogger(__name__)


class ClipboardModifierApp:
    """Composition root: builds one of each component and wires them together."""

    def __init__(self, config: AppConfig, clipboard: Optional[ClipboardSource] = None):
        self.config = config
        self.history_file = HistoryFile(config.history_path)
        self.history_file.file_manager.cleanup_temp_files()
        self.bus = NotificationBus()
        self.store = HistoryStore(self.history_file, bus=self.bus)
        self.clipboard = clipboard or get_clipboard_source(config.clipboard_backend)
        self.poller = ClipboardPoller(
            self.clipboard, self.store, poll_interval=config.poll_interval)
        self.transform_engine = TransformEngine(timeout=config.transform_timeout)
        self._log_subscription = None
        self.running = False

    def _on_history_changed(self, event: HistoryChanged) -> None:
        last = self.store.last
        if last is not None:
            logger.info(f"History now has {len(self.store)} entries, latest: {preview(last.content, 40)!r}")

    def start(self) -> None:
        if self.running:
            return

        self.running = True
        self._log_subscription = self.bus.subscribe(self._on_history_changed)
        self.poller.start()
        print(f"Recording clipboard history to {self.history_file.path}. Press Ctrl+C to stop")

    def stop(self) -> None:
        if not self.running:
            return

        self.running = False
        self.poller.stop()
        if self._log_subscription is not None:
            self.bus.unsubscribe(self._log_subscription)
            self._log_subscription = None
        self.bus.close()

    def run_forever(self) -> None:
        self.start()

        try:
            while self.running:
                time.sleep(self.config.poll_interval)
        except KeyboardInterrupt:
            print("\nStopping...")
        finally:
            self.stop()

    def copy_text(self, text: str) -> Optional[ClipboardEntry]:
        """Put ``text`` on the clipboard and record it right away."""
        if not self.clipboard.write(text):
            return None
        return self.poller.tick()

    def apply_modifier(
        self,
        script: Union[ModifierScript, str],
        text: str,
        copy: bool = True,
    ) -> str:
        modified = self.transform_engine.apply(script, text)
        if copy:
            self.copy_text(modified)
        return modified


def build_config(args) -> AppConfig:
    config = AppConfig.from_env()
    return AppConfig(
        data_dir=Path(args.data_dir).expanduser() if args.data_dir else config.data_dir,
        poll_interval=args.poll_interval if args.poll_interval is not None else config.poll_interval,
        transform_timeout=(
            args.transform_timeout if args.transform_timeout is not None else config.transform_timeout),
        clipboard_backend=args.backend or config.clipboard_backend,
    )


def cmd_run(app: ClipboardModifierApp, args) -> int:
    def signal_handler(signum, frame):
        app.stop()
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    app.run_forever()
    return 0


def cmd_history(app: ClipboardModifierApp, args) -> int:
    if args.search:
        entries = app.store.search(args.search)
    else:
        entries = list(reversed(app.store.entries))

    if args.limit is not None:
        entries = entries[: args.limit]

    if not entries:
        print("No clipboard history")
        return 0

    now = datetime.now(timezone.utc)
    for entry in entries:
        age = format_elapsed((now - entry.timestamp).total_seconds(), now=now)
        print(f"{age:>14}  {preview(entry.content)}")
    return 0


def cmd_apply(app: ClipboardModifierApp, args) -> int:
    if args.script_file:
        try:
            source = Path(args.script_file).read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Could not read script {args.script_file}: {e}")
            return 1
        script = ModifierScript(name=Path(args.script_file).stem, source=source)
    else:
        try:
            script = get_modifier(args.modifier)
        except KeyError as e:
            logger.error(str(e.args[0]))
            return 1

    modified = app.apply_modifier(script, args.text, copy=not args.no_copy)
    print(modified)
    return 0


def cmd_modifiers(app: ClipboardModifierApp, args) -> int:
    for modifier in BUILTIN_MODIFIERS.values():
        print(f"{modifier.name:<14} {modifier.description}")
    return 0


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="clipmod - clipboard history with scriptable text modifiers"
    )

    parser.add_argument(
        "-i", "--poll-interval",
        type=float,
        default=None,
        help="Clipboard polling interval in seconds (default: 1.0)"
    )

    parser.add_argument(
        "-d", "--data-dir",
        type=str,
        default=None,
        help="Directory holding clipboardHistory.json (default: per-user data dir)"
    )

    parser.add_argument(
        "-b", "--backend",
        choices=["linux", "macos", "windows", "memory"],
        default=None,
        help="Clipboard backend (default: detected from the platform)"
    )

    parser.add_argument(
        "-t", "--transform-timeout",
        type=float,
        default=None,
        help="Seconds a modifier script may run (default: 2.0)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose debug logging"
    )

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Record clipboard history until interrupted")

    history_parser = subparsers.add_parser("history", help="Show recorded clipboard history")
    history_parser.add_argument("-n", "--limit", type=int, default=None,
                                help="Show at most N entries")
    history_parser.add_argument("-s", "--search", type=str, default=None,
                                help="Only show entries containing this text")

    apply_parser = subparsers.add_parser("apply", help="Transform text and copy the result")
    source_group = apply_parser.add_mutually_exclusive_group()
    source_group.add_argument("-m", "--modifier", default="utf8-to-hex",
                              help="Built-in modifier name (default: utf8-to-hex)")
    source_group.add_argument("-f", "--script-file", default=None,
                              help="Python file defining modify(text)")
    apply_parser.add_argument("--no-copy", action="store_true",
                              help="Print the result without touching the clipboard")
    apply_parser.add_argument("text", help="Text to transform")

    subparsers.add_parser("modifiers", help="List built-in modifiers")

    return parser.parse_args(argv)


COMMANDS = {
    "run": cmd_run,
    "history": cmd_history,
    "apply": cmd_apply,
    "modifiers": cmd_modifiers,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = build_config(args)
        app = ClipboardModifierApp(config)
        handler = COMMANDS[args.command or "run"]
        return handler(app, args)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
