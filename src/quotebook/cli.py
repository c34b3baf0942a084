"""Command-line interface for quotebook.

Built with Typer for commands and Rich for output. User-scoped commands pick
a local account with ``--as EMAIL`` and go through the same procedure router
as the HTTP API.
"""

from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .access.schemas import VerifiedIdentity, normalize_email
from .config import get_config
from .db.schemas import UserRole
from .errors import QuotebookError
from .rpc import RequestContext, app_router
from .services import Services

# Create the main app
app = typer.Typer(
    name="quotebook",
    help="Collect quotes and get one back every day.",
    no_args_is_help=True,
)

# Create sub-apps for command groups
users_app = typer.Typer(help="Manage local user accounts.")
whitelist_app = typer.Typer(help="Manage the email allow-list.")
collections_app = typer.Typer(help="Manage quote collections.")
quotes_app = typer.Typer(help="Add, list and draw quotes.")
kindle_app = typer.Typer(help="Import Kindle highlights.")
app.add_typer(users_app, name="users")
app.add_typer(whitelist_app, name="whitelist")
app.add_typer(collections_app, name="collections")
app.add_typer(quotes_app, name="quotes")
app.add_typer(kindle_app, name="kindle")

# Rich console for pretty output
console = Console()


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


def get_services() -> Services:
    """Build the service container from the environment."""
    return Services.create(get_config())


def context_for(services: Services, email: str) -> RequestContext:
    """Build a request context acting as the local user with this email."""
    user = services.users.get_by_email(email)
    if user is None:
        print_error(f"No user with email {normalize_email(email)}")
        console.print("[dim]Try 'quotebook users add EMAIL' first.[/dim]")
        raise typer.Exit(1)
    if not services.whitelist.is_allowed(user.email):
        print_error(f"Email {user.email} is not on the allow-list")
        console.print("[dim]Try 'quotebook whitelist add EMAIL' first.[/dim]")
        raise typer.Exit(1)
    return RequestContext(services=services, user=user)


def call(ctx: RequestContext, procedure: str, payload: Any = None) -> Any:
    """Run a procedure, exiting with status 1 on failure."""
    try:
        return app_router.call(ctx, procedure, payload)
    except QuotebookError as e:
        print_error(e.message)
        raise typer.Exit(1)


def format_quote_table(quotes: list[dict], title: str = "Quotes") -> Table:
    """Create a rich table for displaying quotes."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Quote", style="cyan", no_wrap=False, max_width=60)
    table.add_column("Author", style="green", max_width=25)
    table.add_column("Source", max_width=25)
    table.add_column("Read", justify="center")

    for quote in quotes:
        text = quote["text"]
        if len(text) > 120:
            text = text[:117] + "..."
        table.add_row(
            quote["id"],
            escape(text),
            escape(quote["author"] or "-"),
            escape(quote["source"] or "-"),
            str(quote["readCount"]) if quote["isRead"] else "-",
        )

    return table


AS_OPTION = typer.Option(..., "--as", help="Email of the local user to act as")


# ============================================================================
# Setup Commands
# ============================================================================


@app.command("init-db")
def init_db() -> None:
    """Create the database tables."""
    config = get_config()
    errors = config.validate()
    if errors:
        for error in errors:
            print_error(error)
        raise typer.Exit(1)

    get_services()
    print_success(f"Database ready at {config.db_path}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to listen on"),
    debug: bool = typer.Option(False, "--debug", help="Enable the Flask debugger"),
) -> None:
    """Run the HTTP API."""
    from .web import create_app

    config = get_config()
    errors = config.validate()
    if errors:
        for error in errors:
            print_error(error)
        raise typer.Exit(1)

    if not config.has_firebase_config():
        print_warning("No Firebase settings found; using application default credentials.")

    flask_app = create_app(get_services())
    flask_app.run(host=host or config.host, port=port or config.port, debug=debug)


# ============================================================================
# User Commands
# ============================================================================


@users_app.command("add")
def users_add(
    email: str = typer.Argument(..., help="Email address"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Display name"),
    admin: bool = typer.Option(False, "--admin", help="Grant the admin role"),
) -> None:
    """Create a local user and put their email on the allow-list."""
    services = get_services()
    email = normalize_email(email)
    identity = VerifiedIdentity(
        identity_id=f"local:{email}",
        email=email,
        name=name,
        login_method="cli",
    )
    user = services.users.upsert_user(identity, role=UserRole.ADMIN if admin else None)
    services.whitelist.add(email)
    print_success(f"User {user.email} ({user.role})")


@users_app.command("list")
def users_list() -> None:
    """List all users."""
    services = get_services()
    users = services.users.list_users()
    if not users:
        print_info("No users yet.")
        return

    table = Table(title="Users", show_header=True, header_style="bold magenta")
    table.add_column("Email", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Role", style="yellow")
    table.add_column("Login")
    table.add_column("Last signed in", style="dim")
    for user in users:
        table.add_row(
            user.email or "-",
            user.name or "-",
            user.role,
            user.login_method or "-",
            user.last_signed_in,
        )
    console.print(table)


@users_app.command("promote")
def users_promote(
    email: str = typer.Argument(..., help="Email of the user to promote"),
    demote: bool = typer.Option(False, "--demote", help="Set the user role instead"),
) -> None:
    """Grant (or revoke) the admin role."""
    services = get_services()
    user = services.users.get_by_email(email)
    if user is None:
        print_error(f"No user with email {normalize_email(email)}")
        raise typer.Exit(1)

    role = UserRole.USER if demote else UserRole.ADMIN
    user = services.users.set_role(user.id, role)
    print_success(f"{user.email} is now {user.role}")


# ============================================================================
# Allow-list Commands
# ============================================================================


@whitelist_app.command("add")
def whitelist_add(email: str = typer.Argument(..., help="Email address")) -> None:
    """Allow an email to sign in."""
    services = get_services()
    entry = services.whitelist.add(email)
    print_success(f"{entry.email} is allowed")


@whitelist_app.command("remove")
def whitelist_remove(email: str = typer.Argument(..., help="Email address")) -> None:
    """Revoke an email's access."""
    services = get_services()
    if services.whitelist.remove(email):
        print_success(f"{normalize_email(email)} removed")
    else:
        print_warning(f"{normalize_email(email)} was not on the allow-list")


@whitelist_app.command("list")
def whitelist_list() -> None:
    """Show the allow-list."""
    services = get_services()
    entries = services.whitelist.list_entries()
    if not entries:
        print_info("The allow-list is empty.")
        return

    table = Table(title="Allow-list", show_header=True, header_style="bold magenta")
    table.add_column("Email", style="cyan")
    table.add_column("Added", style="dim")
    for entry in entries:
        table.add_row(entry.email, entry.created_at)
    console.print(table)


# ============================================================================
# Collection Commands
# ============================================================================


@collections_app.command("list")
def collections_list(as_email: str = AS_OPTION) -> None:
    """List your collections."""
    ctx = context_for(get_services(), as_email)
    collections = call(ctx, "collections.list")
    if not collections:
        print_info("No collections yet.")
        return

    table = Table(title="Collections", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Name", style="cyan")
    table.add_column("Description", max_width=40)
    table.add_column("Quotes", justify="right")
    for collection in collections:
        count = ctx.services.collections.count_quotes(ctx.user.id, collection["id"])
        name = escape(collection["name"])
        if collection["color"]:
            name = f"[{collection['color']}]■[/] {name}"
        table.add_row(collection["id"], name, escape(collection["description"] or "-"), str(count))
    console.print(table)


@collections_app.command("create")
def collections_create(
    name: str = typer.Argument(..., help="Collection name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Description"),
    color: Optional[str] = typer.Option(None, "--color", "-c", help="Hex color, e.g. #aa3300"),
    as_email: str = AS_OPTION,
) -> None:
    """Create a collection."""
    ctx = context_for(get_services(), as_email)
    collection = call(
        ctx,
        "collections.create",
        {"name": name, "description": description, "color": color},
    )
    print_success(f"Created collection '{collection['name']}' ({collection['id']})")


@collections_app.command("delete")
def collections_delete(
    collection_id: str = typer.Argument(..., help="Collection ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    as_email: str = AS_OPTION,
) -> None:
    """Delete a collection and all of its quotes."""
    ctx = context_for(get_services(), as_email)
    collection = call(ctx, "collections.get", {"id": collection_id})

    if not yes:
        confirm = typer.confirm(f"Delete '{collection['name']}' and all of its quotes?")
        if not confirm:
            raise typer.Exit(0)

    call(ctx, "collections.delete", {"id": collection_id})
    print_success(f"Deleted collection '{collection['name']}'")


# ============================================================================
# Quote Commands
# ============================================================================


@quotes_app.command("add")
def quotes_add(
    text: str = typer.Argument(..., help="Quote text"),
    collection_id: str = typer.Option(..., "--collection", "-c", help="Collection ID"),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="Author"),
    source: Optional[str] = typer.Option(None, "--source", "-s", help="Book or other source"),
    page: Optional[int] = typer.Option(None, "--page", help="Page number"),
    as_email: str = AS_OPTION,
) -> None:
    """Add a quote to a collection."""
    ctx = context_for(get_services(), as_email)
    quote = call(
        ctx,
        "quotes.create",
        {
            "collectionId": collection_id,
            "text": text,
            "author": author,
            "source": source,
            "pageNumber": page,
        },
    )
    print_success(f"Added quote {quote['id']}")


@quotes_app.command("list")
def quotes_list(
    collection_id: Optional[str] = typer.Option(None, "--collection", "-c", help="Only this collection"),
    as_email: str = AS_OPTION,
) -> None:
    """List your quotes, newest first."""
    ctx = context_for(get_services(), as_email)
    if collection_id:
        quotes = call(ctx, "quotes.listByCollection", {"collectionId": collection_id})
    else:
        quotes = call(ctx, "quotes.list")

    if not quotes:
        print_info("No quotes found.")
        return
    console.print(format_quote_table(quotes))


@quotes_app.command("daily")
def quotes_daily(
    mark: bool = typer.Option(False, "--mark", "-m", help="Mark the quote as read"),
    as_email: str = AS_OPTION,
) -> None:
    """Draw today's quote, favoring ones you have not read."""
    ctx = context_for(get_services(), as_email)
    quote = call(ctx, "quotes.getRandom")
    if quote is None:
        print_info("No quotes yet. Add some with 'quotebook quotes add'.")
        return

    attribution = " · ".join(part for part in (quote["author"], quote["source"]) if part)
    body = escape(quote["text"])
    if attribution:
        body += f"\n\n[green]{escape(attribution)}[/green]"
    console.print(Panel(body, title="Quote of the Day"))

    if mark:
        call(ctx, "quotes.markAsRead", {"id": quote["id"]})
        print_info("Marked as read.")


# ============================================================================
# Kindle Commands
# ============================================================================


@kindle_app.command("import")
def kindle_import(
    file: Path = typer.Argument(..., help="My Clippings.txt or a CSV export", exists=True, dir_okay=False),
    collection_id: str = typer.Option(..., "--collection", "-c", help="Target collection ID"),
    as_email: str = AS_OPTION,
) -> None:
    """Import Kindle highlights into a collection."""
    from .kindle.parser import ParseError, parse_export

    ctx = context_for(get_services(), as_email)

    try:
        highlights = parse_export(file.read_text(encoding="utf-8-sig"))
    except ParseError as e:
        print_error(str(e))
        raise typer.Exit(1)

    console.print(f"[dim]Importing {len(highlights)} highlights from {file.name}...[/dim]")
    result = call(
        ctx,
        "kindle.sync",
        {
            "collectionId": collection_id,
            "highlights": [h.model_dump(by_alias=True) for h in highlights],
        },
    )

    console.print(
        f"Added: [green]{result['added']}[/green], "
        f"Duplicated: [yellow]{result['duplicated']}[/yellow], "
        f"Skipped: [red]{result['skipped']}[/red]"
    )
    for error in result["errors"]:
        print_warning(escape(error))


@kindle_app.command("last")
def kindle_last(as_email: str = AS_OPTION) -> None:
    """Show the most recent import."""
    ctx = context_for(get_services(), as_email)
    log = call(ctx, "kindle.getLastSync")
    if log is None:
        print_info("No imports yet.")
        return

    lines = [
        f"[bold]Synced:[/bold] {log['syncedAt']}",
        f"[bold]Status:[/bold] {log['status']}",
        f"[bold]Added:[/bold] {log['quotesAdded']}",
        f"[bold]Duplicated:[/bold] {log['quotesDuplicated']}",
        f"[bold]Skipped:[/bold] {log['quotesSkipped']}",
    ]
    if log["errorMessage"]:
        lines.append(f"[bold]Errors:[/bold] {log['errorMessage']}")
    console.print(Panel("\n".join(lines), title="Last Kindle Import"))


# ============================================================================
# Info Commands
# ============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"quotebook version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
