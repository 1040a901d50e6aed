"""Database management CLI commands."""

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from src.pricehub.core.services.database.db_manage import (
    SEED_COMPANY,
    SEED_SUPER_ADMIN,
    SEED_SUPPLIER,
    DbManageService,
)

console = Console()

db_app = typer.Typer(help="Create, seed and wipe the PriceHub database")


def get_db_manage_service() -> DbManageService:
    """Build the management service from the environment."""
    load_dotenv()
    try:
        return DbManageService()
    except Exception as e:
        console.print(f"[red]❌ Failed to configure the database: {e}[/red]")
        raise typer.Exit(code=1) from e


@db_app.command("init")
def init() -> None:
    """Create all database tables."""
    service = get_db_manage_service()
    try:
        service.create_all()
    except Exception as e:
        console.print(f"[red]❌ Failed to create tables: {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print("[green]✅ Database tables created[/green]")


@db_app.command("seed")
def seed() -> None:
    """Load demo tenants, users, products and prices."""
    service = get_db_manage_service()
    try:
        service.create_all()
        report = service.seed()
    except Exception as e:
        console.print(f"[red]❌ Seed failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    for item in report.created:
        console.print(f"[green]✅ Created {item}[/green]")
    for item in report.skipped:
        console.print(f"[dim]Skipped existing {item}[/dim]")

    console.print(
        Panel.fit(
            "\n".join(
                [
                    f"Super Admin: {SEED_SUPER_ADMIN[0]} / {SEED_SUPER_ADMIN[1]}",
                    f"Supplier: {SEED_SUPPLIER[0]} / {SEED_SUPPLIER[1]}",
                    f"Company: {SEED_COMPANY[0]} / {SEED_COMPANY[1]}",
                ]
            ),
            title="📝 Test Credentials",
            border_style="green",
        )
    )


@db_app.command("clear")
def clear(
    keep_email: str = typer.Option(
        SEED_SUPER_ADMIN[0], "--keep-email", "-k", help="Super admin to preserve"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Delete all data except one super admin."""
    if not force and not Confirm.ask(
        f"Delete ALL data except super admin '{keep_email}'?"
    ):
        console.print("[yellow]Aborted[/yellow]")
        raise typer.Exit()

    service = get_db_manage_service()
    try:
        deleted = service.clear(keep_email)
    except Exception as e:
        console.print(f"[red]❌ Database cleanup failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    table = Table(title="Deleted records")
    table.add_column("Table", style="cyan")
    table.add_column("Rows", style="magenta", justify="right")
    for name, count in deleted.items():
        table.add_row(name, str(count))
    console.print(table)
    console.print(f"\n[green]✅ Super admin preserved: {keep_email}[/green]")
