"""Identity comparison rules shared by the compliance checks."""

from __future__ import annotations

from typing import Iterable

from clabot_core.models import Account

# Gmail ignores periods in the local part, so "user.name@" and "username@"
# deliver to the same mailbox.
_DOTLESS_DOMAINS = ("@gmail.com", "@googlemail.com")


def canonicalize_email(email: str) -> str:
    """Return a comparison-only form of ``email``.

    Lower-cases the whole address and, for Gmail domains, strips periods
    from the local part. Plus-addressing is left alone.
    """
    email = email.lower()
    for suffix in _DOTLESS_DOMAINS:
        if email.endswith(suffix):
            username = email[: -len(suffix)].replace(".", "")
            email = f"{username}{suffix}"
    return email


def match_account(account: Account, accounts: Iterable[Account]) -> bool:
    """Return True if ``account`` matches any entry of ``accounts``.

    Names must match exactly, emails after canonicalization, and logins
    case-insensitively (GitHub logins are not case sensitive).
    """
    email = canonicalize_email(account.email)
    login = account.login.lower()
    for candidate in accounts:
        if (
            account.name == candidate.name
            and email == canonicalize_email(candidate.email)
            and login == candidate.login.lower()
        ):
            return True
    return False


def match_login(logins: Iterable[str], accounts: Iterable[Account]) -> bool:
    """Return True if any of ``logins`` equals the login of any account."""
    known = {a.login for a in accounts}
    return any(login in known for login in logins)
