"""signers command — validate a CLA signers file and look up identities."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from clabot_core.matching import canonicalize_email, match_account, match_login
from clabot_core.models import Account, ClaSigners, ExternalClaSigners

console = Console()


def _section_rows(label: str, signers: ExternalClaSigners) -> list[tuple[str, str, str]]:
    return [
        (label, "people", str(len(signers.people))),
        (label, "bots", str(len(signers.bots))),
        (label, "companies", str(len(signers.companies))),
        (label, "company members", str(sum(len(c.people) for c in signers.companies))),
    ]


def _lookup(signers: ClaSigners, account: Account) -> None:
    console.print(
        f"\nIdentity: [bold]{account.name}[/bold] <{canonicalize_email(account.email)}>, GitHub: {account.login}"
    )
    checks = [
        ("May author commits", match_account(account, signers.all_people())),
        ("May commit", match_account(account, signers.all_accounts())),
        (
            "Externally managed",
            signers.external is not None and match_login([account.login], signers.external.all_accounts()),
        ),
    ]
    for label, ok in checks:
        mark = "[green]yes[/green]" if ok else "[red]no[/red]"
        console.print(f"  {label}: {mark}")


@click.command("signers")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--name", default=None, help="Git author/committer name to look up.")
@click.option("--email", default=None, help="Git author/committer email to look up.")
@click.option("--login", default=None, help="GitHub login to look up.")
def signers_cmd(path: str, name: str | None, email: str | None, login: str | None):
    """Validate a CLA signers file and optionally check one identity against it."""
    from clabot_core.config import ConfigError, load_cla_signers

    try:
        signers = load_cla_signers(path)
    except ConfigError as e:
        raise click.ClickException(str(e))

    table = Table(title=f"CLA signers — {path}", show_header=True, header_style="bold cyan")
    table.add_column("Roster")
    table.add_column("Section")
    table.add_column("Count", justify="right")
    for row in _section_rows("main", signers):
        table.add_row(*row)
    if signers.external is not None:
        for row in _section_rows("external", signers.external):
            table.add_row(*row)
    console.print(table)

    if name or email or login:
        _lookup(signers, Account(name=name or "", email=email or "", login=login or ""))
