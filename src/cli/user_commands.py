"""PriceHub user management CLI commands."""

from collections import Counter

import typer
from dotenv import load_dotenv
from fastapi import HTTPException
from rich.console import Console
from rich.table import Table

from src.pricehub.core.security import ensure_password_strength
from src.pricehub.core.services import DbSessionService
from src.pricehub.core.services.database.db_manage import DbManageService
from src.pricehub.entities import UserRepository

console = Console()

# Create the users subcommand app
users_app = typer.Typer(help="Inspect and create PriceHub users")


def get_db_service() -> DbSessionService:
    load_dotenv()
    try:
        return DbSessionService()
    except Exception as e:
        console.print(f"[red]❌ Failed to connect to the database: {e}[/red]")
        raise typer.Exit(code=1) from e


@users_app.command("list")
def list_users(
    limit: int = typer.Option(100, "--limit", "-l", help="Maximum number of users to show"),
) -> None:
    """List users with a per-role and per-status summary."""
    db_service = get_db_service()
    with db_service.session_scope() as session:
        users = UserRepository(session).list_all()

    if not users:
        console.print("[yellow]No users found[/yellow]")
        return

    table = Table(title="Users")
    table.add_column("Email", style="blue")
    table.add_column("Name", style="green")
    table.add_column("Role", style="magenta")
    table.add_column("Status", style="yellow")
    table.add_column("Active")
    table.add_column("Tenant", style="cyan")

    for user in users[:limit]:
        name = " ".join(part for part in (user.first_name, user.last_name) if part)
        table.add_row(
            user.email,
            name,
            str(user.role),
            str(user.status),
            "✅" if user.is_active else "❌",
            user.tenant_id or "-",
        )
    console.print(table)

    summary = Table(title="Summary")
    summary.add_column("Role / Status", style="cyan")
    summary.add_column("Users", justify="right")
    for (role, status), count in sorted(
        Counter((str(u.role), str(u.status)) for u in users).items()
    ):
        summary.add_row(f"{role} / {status}", str(count))
    console.print(summary)
    console.print(f"\n[green]Found {len(users)} users[/green]")


@users_app.command("create-super-admin")
def create_super_admin(
    email: str = typer.Argument(..., help="Email of the new super admin"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, help="Password"
    ),
) -> None:
    """Create an active super admin account."""
    try:
        ensure_password_strength(password)
    except HTTPException as e:
        console.print(f"[red]❌ {e.detail}[/red]")
        raise typer.Exit(code=1) from e

    db_service = get_db_service()
    service = DbManageService(db_service)
    try:
        service.create_all()
        with db_service.session_scope() as session:
            created = service.create_super_admin(session, email, password)
    except Exception as e:
        console.print(f"[red]❌ Failed to create super admin: {e}[/red]")
        raise typer.Exit(code=1) from e

    if created is None:
        console.print(f"[red]❌ User '{email}' already exists[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]✅ Created super admin '{email}'[/green]")
