"""Command-line entry point: build a release summary for one project stanza."""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path

import pytz

from harvester.core.config import DEFAULT_CONFIG_FILE, DEFAULT_PROJECT, REPORT_TIMESTAMP_FORMAT
from harvester.core.jira_client import JiraAPI, TrackerConnectionError, TrackerError
from harvester.core.service import ReleaseReportService
from harvester.core.settings import EXIT_CONNECTION, ConfigError, HarvesterSettings, load_settings
from harvester.visual.report import format_run_summary

logger = logging.getLogger("harvester")

ApiFactory = Callable[[str, str, str], JiraAPI]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="release-harvester",
        description=(
            "Retrieve development ticket data for the next release from JIRA. "
            "The project parameter selects a stanza in the config file."
        ),
    )
    parser.add_argument(
        "-c", "--config", default=DEFAULT_CONFIG_FILE, help=f"config file (default: {DEFAULT_CONFIG_FILE})"
    )
    parser.add_argument(
        "-p", "--project", default=DEFAULT_PROJECT, help=f"project stanza (default: {DEFAULT_PROJECT})"
    )
    parser.add_argument("-o", "--output", help="report file (default: <outputPrefix>-<timestamp>.txt)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log progress for every ticket")
    return parser


def default_report_name(settings: HarvesterSettings, now: datetime | None = None) -> str:
    now = now or datetime.now(pytz.timezone(settings.timezone))
    return f"{settings.output_prefix}-{now.strftime(REPORT_TIMESTAMP_FORMAT)}.txt"


def _log_progress(message: str, current: int | None, total: int | None) -> None:
    if current is None:
        logger.debug(message)
    else:
        logger.debug("[%s] %s", current, message)


def main(argv: Sequence[str] | None = None, api_factory: ApiFactory = JiraAPI) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        level=logging.INFO,
    )
    logger.setLevel(logging.DEBUG if args.verbose else logging.INFO)

    try:
        settings = load_settings(args.config, args.project)
    except ConfigError as exc:
        print(f"release-harvester: {exc} - aborting...", file=sys.stderr)
        return exc.exit_code

    password = settings.password or getpass.getpass("Password: ")

    try:
        api = api_factory(settings.host, settings.username, password)
        service = ReleaseReportService(api, settings.rules)
        report_path = Path(args.output or default_report_name(settings))
        tally = service.run(
            settings.jql,
            lambda: report_path.open("w", encoding="utf-8"),
            progress=_log_progress if args.verbose else None,
        )
    except TrackerConnectionError as exc:
        print(f'Failed to connect to JIRA at "{settings.host}": {exc}', file=sys.stderr)
        return EXIT_CONNECTION
    except TrackerError as exc:
        print(f'JIRA query failed at "{settings.host}": {exc}', file=sys.stderr)
        return EXIT_CONNECTION

    logger.debug("Report written to %s", report_path)
    print(format_run_summary(tally))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
