"""GitHub token resolution with secrets-file and gh CLI fallbacks.

Resolution order (stops at first success):
  1. `auth` value of the --secrets file, when one is given
  2. GITHUB_TOKEN environment variable (CI / explicit override)
  3. `gh auth token` (GitHub CLI session — works after `gh auth login`)
"""

from __future__ import annotations

import logging
import os
import subprocess

from clabot_core.config import load_secrets

logger = logging.getLogger(__name__)


def resolve_github_token(secrets_path: str | None = None) -> str | None:
    """Return a GitHub token or None if no valid source is available.

    Raises ConfigError only when an explicitly given secrets file is
    unusable; every other source fails quietly so callers can emit a
    UsageError.
    """
    if secrets_path:
        return load_secrets(secrets_path)

    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token

    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0:
            gh_token = result.stdout.strip()
            if gh_token:
                logger.debug("Resolved GitHub token via gh CLI session.")
                return gh_token
    except (FileNotFoundError, subprocess.TimeoutExpired):
        # gh is not installed or timed out.
        pass

    return None
