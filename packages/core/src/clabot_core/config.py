import json
from pathlib import Path
from typing import Optional

import yaml

from clabot_core.models import Account, ClaSigners, Company, ExternalClaSigners

DEFAULT_CONFIG: dict = {
    "org": None,
    "repo": None,  # None = every repository in the org
    "pulls": [],  # empty = every open pull request
    "cla_signers": None,  # path to the roster file (YAML or JSON)
    "secrets": None,  # optional path to a YAML/JSON file with an `auth` token
    "update_repo": False,
    "unknown_as_external": False,
    "notification": "comment",  # comment | review | none
}


class ConfigError(ValueError):
    """Raised when a config, secrets or CLA signers file cannot be used."""


def load_config(config_path: str = ".clabot.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load run configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .clabot.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG, "pulls": list(DEFAULT_CONFIG["pulls"])}

    path = Path(config_path)
    if path.exists():
        file_config = _read_structured(path, "config")
        if file_config is None:
            file_config = {}
        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file ({config_path}) must contain a mapping.")
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    if isinstance(config.get("pulls"), str):
        config["pulls"] = parse_pull_numbers(config["pulls"])

    return config


def parse_pull_numbers(value: str) -> list[int]:
    """Parse a comma-separated list of pull request numbers such as ``"12,15"``."""
    numbers = []
    for element in value.split(","):
        element = element.strip()
        if not element:
            continue
        if not element.isdigit():
            raise ConfigError(f"Invalid pull request number: {element!r}")
        numbers.append(int(element))
    return numbers


def _read_structured(path: Path, kind: str):
    """Read a YAML or JSON file, choosing the parser by extension."""
    try:
        contents = path.read_text()
    except OSError as e:
        raise ConfigError(f"Error reading {kind} file ({path}): {e}") from e

    try:
        if path.suffix == ".json":
            return json.loads(contents) if contents.strip() else None
        if path.suffix in (".yaml", ".yml"):
            return yaml.safe_load(contents)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Error parsing {kind} file ({path}): {e}") from e

    raise ConfigError(f"Error parsing {kind} file ({path}): unrecognized file type")


def load_secrets(secrets_path: str) -> str:
    """Return the ``auth`` token from a secrets file."""
    secrets = _read_structured(Path(secrets_path), "secrets") or {}
    if not isinstance(secrets, dict) or not secrets.get("auth"):
        raise ConfigError(f"Secrets file ({secrets_path}) has no `auth` value.")
    return str(secrets["auth"])


def _section(data: dict, key: str, where: str) -> list:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise ConfigError(f"`{where}{key}` must be a list.")
    return value


def _parse_account(entry, where: str) -> Account:
    if not isinstance(entry, dict):
        raise ConfigError(f"Entry in `{where}` must be a mapping with name, email and github keys.")
    return Account(
        name=str(entry.get("name") or ""),
        email=str(entry.get("email") or ""),
        login=str(entry.get("github") or ""),
    )


def _parse_accounts(data: dict, key: str, prefix: str) -> list[Account]:
    return [_parse_account(e, f"{prefix}{key}") for e in _section(data, key, prefix)]


def _parse_companies(data: dict, prefix: str) -> list[Company]:
    companies = []
    for entry in _section(data, "companies", prefix):
        if not isinstance(entry, dict):
            raise ConfigError(f"Entry in `{prefix}companies` must be a mapping.")
        where = f"{prefix}companies.{entry.get('name', '?')}."
        companies.append(
            Company(
                name=str(entry.get("name") or ""),
                domains=[str(d) for d in _section(entry, "domains", where)],
                people=_parse_accounts(entry, "people", where),
            )
        )
    return companies


def parse_cla_signers(data: Optional[dict]) -> ClaSigners:
    """Build a ClaSigners roster from already-deserialized YAML/JSON data."""
    if data is None:
        return ClaSigners()
    if not isinstance(data, dict):
        raise ConfigError("CLA signers data must be a mapping.")

    external = None
    if data.get("external") is not None:
        ext = data["external"]
        if not isinstance(ext, dict):
            raise ConfigError("`external` must be a mapping.")
        external = ExternalClaSigners(
            people=_parse_accounts(ext, "people", "external."),
            bots=_parse_accounts(ext, "bots", "external."),
            companies=_parse_companies(ext, "external."),
        )

    return ClaSigners(
        people=_parse_accounts(data, "people", ""),
        bots=_parse_accounts(data, "bots", ""),
        companies=_parse_companies(data, ""),
        external=external,
    )


def load_cla_signers(path: str) -> ClaSigners:
    """
    Load the CLA signers roster.

    The file is YAML (``.yaml``/``.yml``) or JSON (``.json``) with top-level
    ``people``, ``bots``, ``companies`` and an optional ``external`` section
    of the same shape. Raises ConfigError on any read or structural problem.
    """
    data = _read_structured(Path(path), "CLA signers")
    try:
        return parse_cla_signers(data)
    except ConfigError as e:
        raise ConfigError(f"Invalid CLA signers file ({path}): {e}") from e
