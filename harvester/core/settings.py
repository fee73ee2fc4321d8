"""Load the YAML configuration file into a resolved settings bundle.

The file is organised in stanzas: a ``jira`` stanza with the connection
details and one stanza per project holding its saved query::

    jira:
      host: https://jira.example.org
      username: harvester
      password: ""          # empty -> prompted for at run time

    Finna:
      jql: project = FINNA AND status = Resolved AND fixVersion is EMPTY
      outputPrefix: Finna-release-summary

Optional top-level ``resolutions`` and ``issue_types`` mappings replace the
built-in classification tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytz
import yaml

from .config import DEFAULT_REPORT_PREFIX, TIMEZONE
from .rules import RuleTableError, RuleTables

EXIT_CONFIG_INVALID = 1
EXIT_CONNECTION = 2
EXIT_CONFIG_MISSING = 3


class ConfigError(Exception):
    """Fatal configuration problem, carrying the process exit code."""

    def __init__(self, message: str, exit_code: int = EXIT_CONFIG_INVALID):
        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True, frozen=True)
class HarvesterSettings:
    host: str
    username: str
    password: str
    jql: str
    project: str
    output_prefix: str = DEFAULT_REPORT_PREFIX
    timezone: str = TIMEZONE
    rules: RuleTables = field(default_factory=RuleTables)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f'Failed to read configuration file "{path}": {exc}') from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f'Configuration file "{path}" must contain a mapping of stanzas')
    return data


def _text(stanza: dict[str, Any], name: str) -> str:
    value = stanza.get(name)
    return "" if value is None else str(value).strip()


def load_settings(path: str | Path, project: str) -> HarvesterSettings:
    """Resolve connection, query and rule settings for ``project``.

    Raises ``ConfigError`` before any tracker contact when something
    required is missing.
    """
    path = Path(path)
    data = _read_yaml(path)

    jira = data.get("jira")
    if not isinstance(jira, dict):
        raise ConfigError(
            f"Cannot find stanza 'jira' in configuration file '{path}'",
            EXIT_CONFIG_MISSING,
        )
    host = _text(jira, "host")
    username = _text(jira, "username")
    if not host or not username:
        raise ConfigError(
            f"missing host or username definition in stanza 'jira', configuration file "
            f"'{path}'. Please review the file; password value may be empty."
        )

    stanza = data.get(project)
    if not isinstance(stanza, dict):
        raise ConfigError(
            f"Cannot find stanza '{project}' in configuration file '{path}'",
            EXIT_CONFIG_MISSING,
        )
    jql = _text(stanza, "jql")
    if not jql:
        raise ConfigError(
            f"Query definition (parameter 'jql') not found for '{project}' in "
            f"configuration file '{path}'",
            EXIT_CONFIG_MISSING,
        )

    try:
        rules = RuleTables.from_mappings(data.get("resolutions"), data.get("issue_types"))
    except RuleTableError as exc:
        raise ConfigError(f"Invalid rule table in '{path}': {exc}", EXIT_CONFIG_MISSING) from exc

    timezone = _text(stanza, "timezone") or TIMEZONE
    try:
        pytz.timezone(timezone)
    except pytz.UnknownTimeZoneError as exc:
        raise ConfigError(f"Unknown timezone {timezone!r} for '{project}' in '{path}'") from exc

    return HarvesterSettings(
        host=host,
        username=username,
        password="" if jira.get("password") is None else str(jira["password"]),
        jql=jql,
        project=project,
        output_prefix=_text(stanza, "outputPrefix") or DEFAULT_REPORT_PREFIX,
        timezone=timezone,
        rules=rules,
    )
