"""check command — verify CLA coverage of pull requests and reconcile labels."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from clabot_core.compliance import ComplianceChecker
from clabot_core.gh.client import GitHubClient
from clabot_core.notify import NotificationPolicy
from clabot_core.processor import MUTATION_COMMENT, ClaProcessor, Mutation, ProcessSpec, RunSummary

console = Console()

_VERDICT_STYLE = {
    "compliant": "green",
    "not compliant": "red",
    "external": "cyan",
    "error": "yellow",
}


def _describe(mutation: Mutation) -> str:
    text = mutation.kind.replace("_", " ")
    if mutation.kind != MUTATION_COMMENT:
        text += f" {mutation.detail}"
    if mutation.error:
        text += " (failed)"
    return text


def _print_summary(summary: RunSummary, update_repo: bool) -> None:
    if not summary.results and not summary.repo_errors:
        console.print("[yellow]No pull requests found.[/yellow]")
        return

    table = Table(title=f"CLA status — {summary.org}", show_header=True, header_style="bold cyan")
    table.add_column("Repo")
    table.add_column("PR", style="bold", width=6)
    table.add_column("Title", max_width=40)
    table.add_column("Verdict", width=14)
    table.add_column("Changes" if update_repo else "Changes (dry run)")

    for r in summary.results:
        style = _VERDICT_STYLE.get(r.verdict, "white")
        changes = ", ".join(_describe(m) for m in r.mutations)
        table.add_row(
            r.repo,
            f"#{r.number}",
            escape(r.title[:40]),
            f"[{style}]{r.verdict}[/{style}]",
            changes or "—",
        )
    console.print(table)

    for repo, error in summary.repo_errors.items():
        console.print(f"[yellow]Skipped {escape(repo)}: {escape(error)}[/yellow]")


@click.command("check")
@click.option("--org", default=None, help="GitHub organization or user. Overrides config file.")
@click.option("--repo", default=None, help="Single repository name. Omit to process every repository.")
@click.option("--pr", "pulls", default=None, help="Comma-separated pull request numbers, e.g. 12,15.")
@click.option("--cla-signers", "cla_signers", default=None, help="Path to the CLA signers file (YAML or JSON).")
@click.option("--secrets", default=None, help="Path to a YAML/JSON file holding the GitHub token under `auth`.")
@click.option("--update-repo", is_flag=True, help="Apply label, comment and review changes to GitHub.")
@click.option(
    "--unknown-as-external",
    is_flag=True,
    help="Treat logins missing from the CLA signers file as externally managed.",
)
@click.option(
    "--notification",
    type=click.Choice([p.value for p in NotificationPolicy]),
    default=None,
    help="How to notify non-compliant PRs. Overrides config file.",
)
@click.pass_context
def check_cmd(
    ctx,
    org: str | None,
    repo: str | None,
    pulls: str | None,
    cla_signers: str | None,
    secrets: str | None,
    update_repo: bool,
    unknown_as_external: bool,
    notification: str | None,
):
    """Check that every commit on each pull request is covered by a CLA.

    Labels pull requests with `cla: yes`, `cla: no` or `cla: external`.
    Without --update-repo nothing is written; the intended changes are
    printed instead.

    \b
    Token sources, in order:
      --secrets FILE       `auth` key of a YAML/JSON file
      GITHUB_TOKEN         GitHub personal access token
      gh auth token        GitHub CLI session
    """
    from clabot_cli.auth import resolve_github_token
    from clabot_core.config import ConfigError, load_cla_signers, load_config

    config_path = ctx.obj.get("config_path", ".clabot.yml") if ctx.obj else ".clabot.yml"
    try:
        config = load_config(
            config_path,
            cli_overrides={
                "org": org,
                "repo": repo,
                "pulls": pulls,
                "cla_signers": cla_signers,
                "secrets": secrets,
                "update_repo": True if update_repo else None,
                "unknown_as_external": True if unknown_as_external else None,
                "notification": notification,
            },
        )
    except ConfigError as e:
        raise click.ClickException(str(e))

    if not config.get("org"):
        raise click.UsageError("--org must be given or `org` must be set in the config file.")
    if not config.get("cla_signers"):
        raise click.UsageError("--cla-signers must be given or `cla_signers` must be set in the config file.")

    try:
        policy = NotificationPolicy(config["notification"])
    except ValueError:
        raise click.UsageError(f"Unknown notification policy: {config['notification']!r}")

    # Everything is loaded up front so a bad file halts before any PR is touched.
    try:
        signers = load_cla_signers(config["cla_signers"])
        token = resolve_github_token(config.get("secrets"))
    except ConfigError as e:
        raise click.ClickException(str(e))

    if not token:
        raise click.UsageError(
            "No GitHub token found. Use --secrets, set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )

    client = GitHubClient(token=token)
    processor = ClaProcessor(
        reader=client,
        writer=client,
        checker=ComplianceChecker(signers, unknown_as_external=bool(config["unknown_as_external"])),
        policy=policy,
    )
    spec = ProcessSpec(
        org=config["org"],
        repo=config.get("repo"),
        pulls=list(config.get("pulls") or []),
        update_repo=bool(config["update_repo"]),
    )
    summary = processor.process_org_repo(spec)

    _print_summary(summary, spec.update_repo)
    if summary.failed:
        ctx.exit(1)
