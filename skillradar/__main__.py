"""Entry point: ``python -m skillradar``.

Headless actions (--export, --share-url) run without importing Kivy.
Otherwise the Kivy app starts, read-only when --shared decodes.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from skillradar.common.config_store import JsonFileConfigStore
from skillradar.common.settings import AppSettings, load_settings
from skillradar.core.demo import load_demo
from skillradar.core.export import export_standalone
from skillradar.core.persistence import StateRepository
from skillradar.core.session import Session
from skillradar.core.snapshot import SHARE_FRAGMENT_PREFIX, DecodeResult, decode_snapshot, parse_share_fragment

_logger = logging.getLogger("skillradar.main")

DEFAULT_CONFIG_FILE = "skillradar.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skillradar",
        description="Score tasks against competencies and view the result as a radar chart.",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG_FILE, help="JSON file holding the settings section")
    parser.add_argument("--data", default=None, help="JSON file holding the skill data (overrides settings)")
    parser.add_argument("--shared", default=None, help="share link, #d=... fragment or bare token to view read-only")
    parser.add_argument("--subject", default=None, help="subject name written into shared snapshots")
    parser.add_argument("--export", default=None, metavar="PATH", help="write a standalone HTML document and exit")
    parser.add_argument("--auto-print", action="store_true", help="exported document opens the print dialog")
    parser.add_argument("--share-url", action="store_true", help="print a share link and exit")
    return parser


def decode_shared_argument(value: str) -> DecodeResult:
    """Accept a full URL, a ``#d=...`` / ``d=...`` fragment or a bare token."""
    text = value.strip()
    if "#" in text or text.startswith(SHARE_FRAGMENT_PREFIX):
        return parse_share_fragment(text)
    return decode_snapshot(text)


def open_repository(config_store: JsonFileConfigStore, data_file: str) -> StateRepository:
    if os.path.abspath(data_file) == os.path.abspath(config_store.filename):
        return StateRepository(config_store)
    return StateRepository.open(data_file)


def resolve_data_file(args: argparse.Namespace, settings: AppSettings) -> str:
    return args.data or settings.data_file


def resolve_session(args: argparse.Namespace, settings: AppSettings, config_store: JsonFileConfigStore) -> Session:
    """Shared read-only session when --shared decodes, interactive otherwise."""
    subject = args.subject or settings.subject_name
    if args.shared:
        result = decode_shared_argument(args.shared)
        if result.success and result.payload is not None:
            return Session.shared(result.payload)
        _logger.warning("No shared payload (%s); starting interactive mode", result.error_message)

    repository = open_repository(config_store, resolve_data_file(args, settings))
    store = repository.load(load_demo)
    return Session.interactive(store, repository, subject_name=subject)


def run_gui(session: Session, settings: AppSettings, data_file: str) -> None:
    # Must be set before the first Kivy import; our own argv is already parsed
    os.environ["KCFG_KIVY_LOG_LEVEL"] = os.environ.get("KCFG_KIVY_LOG_LEVEL", "warning")
    os.environ.setdefault("KIVY_NO_ARGS", "1")

    from kivy.core.window import Window

    from skillradar.gui.app import SkillRadarApp

    Window.size = (settings.window_width, settings.window_height)
    SkillRadarApp(session, settings, data_file=data_file).run()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config_store = JsonFileConfigStore(args.config)
    settings = load_settings(config_store)
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    session = resolve_session(args, settings, config_store)

    if args.export:
        result = export_standalone(
            session.snapshot(),
            args.export,
            auto_print=args.auto_print,
            auto_print_delay_ms=settings.auto_print_delay_ms,
        )
        if not result.success:
            print(f"Export failed: {result.error_message}", file=sys.stderr)
            return 1
        print(result.output_path)
        return 0

    if args.share_url:
        print(session.share_url(settings.share_base_url))
        return 0

    run_gui(session, settings, resolve_data_file(args, settings))
    return 0


if __name__ == "__main__":
    sys.exit(main())
