"""
Command-line interface for hubox.

A thin shell over ``CommandSurface``: each invocation resolves the stored
token, starts a session, runs one command and prints the result.

Usage:
    hubox login TOKEN   # Validate and store a GitHub token
    hubox sync          # Fetch and reconcile notifications
    hubox inbox         # Show the active working set
    hubox done ID       # Mark a notification done
    hubox stats         # Show counters
"""

import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any

import click

from hubox.commands import CommandResult, CommandSurface
from hubox.inbox.schemas import Notification, NotificationDetails
from hubox.observability.logging import bind_context, clear_context, setup_logging


def build_commands() -> CommandSurface:
    """Create the command surface with default settings."""
    return CommandSurface()


def _emit(result: CommandResult, as_json: bool, render: Callable[[Any], None]) -> None:
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    elif result.ok:
        render(result.value)
    else:
        click.echo(click.style(f"Error: {result.error}", fg="red"), err=True)

    if not result.ok:
        sys.exit(1)


def _run_session(
    command: Callable[[CommandSurface], Awaitable[CommandResult]],
    validate: bool = True,
) -> CommandResult:
    """Initialize a session from the stored token, then run ``command``.

    Commands that only read or change local state pass ``validate=False``
    so they work without network access.
    """

    async def run() -> CommandResult:
        commands = build_commands()
        token_result = await commands.get_token()
        if not token_result.ok:
            return token_result
        if not token_result.value:
            return CommandResult.failure("No token stored; run `hubox login TOKEN` first")

        init_result = await commands.initialize(token_result.value, validate=validate)
        if not init_result.ok:
            return init_result
        return await command(commands)

    return asyncio.run(run())


def _render_notifications(notifications: list[Notification]) -> None:
    if not notifications:
        click.echo("No notifications")
        return

    for n in notifications:
        marker = " " if n.read else "*"
        updated = n.updated_at.strftime("%Y-%m-%d %H:%M")
        click.echo(
            f"{marker} {n.id:>12}  {updated}  {n.repository.full_name:<30} "
            f"[{n.subject.subject_type}] {n.subject.title}"
        )


def _render_details(details: NotificationDetails) -> None:
    n = details.notification
    click.echo(f"{n.subject.title}")
    click.echo(f"  {n.repository.full_name} - {n.subject.subject_type} ({n.reason})")
    body = details.issue or details.pull_request
    if body is not None:
        click.echo(f"  state: {body.get('state', 'unknown')}  url: {body.get('html_url', '')}")
        if body.get("body"):
            click.echo("")
            click.echo(body["body"])
    if details.comments is not None:
        click.echo(f"\nComments ({len(details.comments)}):")
        for comment in details.comments:
            click.echo(f"- {comment.user_login} at {comment.created_at}:")
            click.echo(f"  {comment.body}")


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """Hubox - a curated local inbox for GitHub notifications."""
    clear_context()
    setup_logging(level="DEBUG" if debug else None)


@main.command()
@click.argument("token")
def login(token: str) -> None:
    """Validate TOKEN and store it in the system keychain."""
    bind_context(command="login")
    result = asyncio.run(build_commands().save_token(token))
    _emit(result, False, lambda _: click.echo(click.style("Token saved", fg="green")))


@main.command()
def logout() -> None:
    """Delete the stored token."""
    bind_context(command="logout")
    result = asyncio.run(build_commands().delete_token())
    _emit(result, False, lambda _: click.echo("Token deleted"))


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
def sync(as_json: bool) -> None:
    """Fetch notifications and reconcile the local inbox."""
    bind_context(command="sync")
    result = _run_session(lambda c: c.sync())
    _emit(result, as_json, lambda count: click.echo(f"Synced {count} notifications"))


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
def inbox(as_json: bool) -> None:
    """Show the active working set."""
    result = _run_session(lambda c: c.get_in_progress(), validate=False)
    _emit(result, as_json, _render_notifications)


@main.command("all")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
def all_notifications(as_json: bool) -> None:
    """Show every known notification."""
    result = _run_session(lambda c: c.get_all(), validate=False)
    _emit(result, as_json, _render_notifications)


@main.command("done-list")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
def done_list(as_json: bool) -> None:
    """Show notifications marked done."""
    result = _run_session(lambda c: c.get_done(), validate=False)
    _emit(result, as_json, _render_notifications)


@main.command()
@click.argument("notification_id")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
def show(notification_id: str, as_json: bool) -> None:
    """Show details and comments for a notification."""
    bind_context(command="show", notification_id=notification_id)
    result = _run_session(lambda c: c.get_details(notification_id))
    _emit(result, as_json, _render_details)


@main.command()
@click.argument("notification_id")
def read(notification_id: str) -> None:
    """Mark a notification read locally."""
    bind_context(command="read", notification_id=notification_id)
    result = _run_session(lambda c: c.mark_read(notification_id), validate=False)
    _emit(
        result,
        False,
        lambda found: click.echo("Marked read" if found else f"Unknown notification {notification_id}"),
    )


@main.command()
@click.argument("notification_id")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
def done(notification_id: str, as_json: bool) -> None:
    """Mark a notification done (and on GitHub, best-effort)."""
    bind_context(command="done", notification_id=notification_id)

    def render(outcome) -> None:
        if not outcome.found:
            click.echo(f"Unknown notification {notification_id}")
        elif outcome.remote_confirmed:
            click.echo(click.style("Marked done", fg="green"))
        else:
            click.echo(
                click.style(
                    f"Marked done locally; GitHub not updated: {outcome.remote_error}",
                    fg="yellow",
                )
            )

    result = _run_session(lambda c: c.mark_done(notification_id))
    _emit(result, as_json, render)


@main.command()
def expand() -> None:
    """Grow the active working set by one step."""
    bind_context(command="expand")
    result = _run_session(lambda c: c.expand_inbox(), validate=False)
    _emit(result, False, lambda capacity: click.echo(f"Inbox capacity is now {capacity}"))


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
def stats(as_json: bool) -> None:
    """Show notification counters."""

    def render(value) -> None:
        if value.last_sync:
            synced = datetime.fromtimestamp(value.last_sync / 1000, tz=timezone.utc)
            last_sync = synced.strftime("%Y-%m-%d %H:%M:%S UTC")
        else:
            last_sync = "never"
        click.echo("\nInbox Stats:")
        click.echo("-" * 40)
        click.echo(f"  total: {value.total}")
        click.echo(f"  unread (GitHub): {value.unread}")
        click.echo(f"  unread (inbox): {value.app_unread}")
        click.echo(f"  in progress: {value.in_progress}")
        click.echo(f"  done: {value.done}")
        click.echo(f"  last sync: {last_sync}")
        click.echo(f"  online: {value.is_online}")

    result = _run_session(lambda c: c.get_stats(), validate=False)
    _emit(result, as_json, render)


if __name__ == "__main__":
    main()
