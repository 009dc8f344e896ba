"""SIMS PPOB CLI - Main commands."""
import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from simspy import APIConfig, SimsClient, SimsException, UnauthorizedError, TransactionType

app = typer.Typer(
    name="sims",
    help="SIMS PPOB payment CLI",
    add_completion=False
)
console = Console()


# Session path: ~/.config/simspy/credentials.session
def get_session_path() -> Path:
    config_dir = Path.home() / ".config" / "simspy"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir / "credentials"


def format_rupiah(amount: int) -> str:
    return "Rp " + f"{amount:,}".replace(",", ".")


def run_async(coro):
    """Run async function, turning client errors into a clean exit."""
    try:
        return asyncio.run(coro)
    except UnauthorizedError as e:
        console.print(f"[red]{e}. Run 'sims login' to start a new session.[/red]")
        raise typer.Exit(1)
    except (SimsException, FileNotFoundError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def open_client() -> SimsClient:
    return SimsClient(str(get_session_path()), config=APIConfig.from_env())


def require_login(sims: SimsClient) -> None:
    if not sims.guard.can_access_private():
        console.print("[red]Not logged in. Run 'sims login' first.[/red]")
        raise typer.Exit(1)


@app.command()
def login(
    email: str = typer.Option(None, "--email", "-e", help="Account email"),
    password: str = typer.Option(None, "--password", "-p", help="Account password"),
):
    """Login and save the session token."""
    if not email:
        email = typer.prompt("Email")
    if not password:
        password = typer.prompt("Password", hide_input=True)

    async def do_login():
        async with open_client() as sims:
            result = await sims.login(email, password)
            console.print(f"[green]Logged in as {result.email}[/green]")
            console.print(f"Session saved to: {get_session_path()}.session")

    run_async(do_login())


@app.command()
def register(
    email: str = typer.Option(..., "--email", "-e", prompt=True, help="Account email"),
    first_name: str = typer.Option(..., "--first-name", prompt=True, help="First name"),
    last_name: str = typer.Option(..., "--last-name", prompt=True, help="Last name"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True,
        confirmation_prompt=True, help="Password (min. 8 characters)"
    ),
):
    """Create a new account."""
    async def do_register():
        async with open_client() as sims:
            if not sims.guard.can_access_public_only():
                console.print("[yellow]Already logged in. Run 'sims logout' first.[/yellow]")
                raise typer.Exit(1)
            await sims.register(email, first_name, last_name, password)
            console.print("[green]Registration successful. You can now log in.[/green]")

    run_async(do_register())


@app.command()
def logout():
    """Logout and forget the saved token."""
    async def do_logout():
        async with open_client() as sims:
            if not sims.is_logged_in():
                console.print("[yellow]No active session[/yellow]")
                return
            sims.logout()
            console.print("[green]Logged out successfully[/green]")

    run_async(do_logout())


@app.command()
def whoami():
    """Show the current user's profile."""
    async def show_profile():
        async with open_client() as sims:
            require_login(sims)
            profile = await sims.cache.refresh_profile()
            console.print(f"Email: {profile.email}")
            console.print(f"Name: {profile.full_name}")
            if profile.profile_image:
                console.print(f"Avatar: {profile.profile_image}")

    run_async(show_profile())


@app.command()
def balance():
    """Show the current balance."""
    async def show_balance():
        async with open_client() as sims:
            require_login(sims)
            current = await sims.cache.refresh_balance()
            console.print(f"[bold]Balance:[/bold] {format_rupiah(current.amount)}")

    run_async(show_balance())


@app.command()
def services():
    """List payable services."""
    async def list_services():
        async with open_client() as sims:
            require_login(sims)
            catalog = await sims.cache.refresh_services()

            table = Table()
            table.add_column("Code", style="cyan")
            table.add_column("Name")
            table.add_column("Tariff", justify="right")
            for service in catalog:
                table.add_row(service.code, service.name, format_rupiah(service.tariff))
            console.print(table)

    run_async(list_services())


@app.command()
def banners():
    """List promotional banners."""
    async def list_banners():
        async with open_client() as sims:
            require_login(sims)
            for banner in await sims.cache.refresh_banners():
                console.print(f"[bold]{banner.name}[/bold] {banner.image_url}")
                if banner.description:
                    console.print(f"  [dim]{banner.description}[/dim]")

    run_async(list_banners())


@app.command()
def topup(
    amount: int = typer.Argument(..., help="Amount in rupiah (10.000 - 1.000.000)"),
):
    """Top up the balance."""
    async def do_topup():
        async with open_client() as sims:
            require_login(sims)
            new_balance = await sims.account.top_up(amount)
            console.print(f"[green]Top up of {format_rupiah(amount)} successful[/green]")
            console.print(f"[bold]Balance:[/bold] {format_rupiah(new_balance.amount)}")

    run_async(do_topup())


@app.command()
def pay(
    service_code: str = typer.Argument(..., help="Service code (see 'sims services')"),
):
    """Pay for a service."""
    async def do_pay():
        async with open_client() as sims:
            require_login(sims)
            # Load catalog and balance so an insufficient balance fails locally
            await sims.cache.refresh_services()
            await sims.cache.refresh_balance()
            if sims.cache.find_service(service_code) is None:
                console.print(f"[red]Unknown service: {service_code}[/red]")
                raise typer.Exit(1)

            result = await sims.account.pay(service_code)
            console.print(
                f"[green]Paid {result.service_name or service_code}: "
                f"{format_rupiah(result.amount)}[/green]"
            )
            if result.invoice_number:
                console.print(f"Invoice: {result.invoice_number}")
            if result.balance is not None:
                console.print(f"[bold]Balance:[/bold] {format_rupiah(result.balance.amount)}")
            else:
                console.print("[yellow]Balance unknown, run 'sims balance' to check it[/yellow]")

    run_async(do_pay())


@app.command()
def history(
    pages: int = typer.Option(1, "--pages", "-n", min=1, help="Number of pages to load"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", min=1, help="Records per page"),
):
    """Show transaction history."""
    async def show_history():
        async with open_client() as sims:
            require_login(sims)
            sims.history.reset()
            for _ in range(pages):
                await sims.history.load_next_page(limit)
                if sims.history.exhausted:
                    break

            table = Table()
            table.add_column("Date", style="dim")
            table.add_column("Description")
            table.add_column("Amount", justify="right")
            for record in sims.history.records:
                color = "green" if record.type is TransactionType.TOPUP else "red"
                sign = "+" if record.type is TransactionType.TOPUP else "-"
                table.add_row(
                    record.created_at.strftime("%d %b %Y %H:%M"),
                    record.description,
                    f"[{color}]{sign} {format_rupiah(record.amount)}[/{color}]"
                )
            console.print(table)

            if not sims.history.exhausted:
                console.print("[dim]More records available, use --pages to load more[/dim]")

    run_async(show_history())


@app.command("update-profile")
def update_profile(
    first_name: str = typer.Option(..., "--first-name", prompt=True, help="First name"),
    last_name: str = typer.Option(..., "--last-name", prompt=True, help="Last name"),
):
    """Change first and last name."""
    async def do_update():
        async with open_client() as sims:
            require_login(sims)
            profile = await sims.account.update_profile(first_name, last_name)
            console.print(f"[green]Profile updated:[/green] {profile.full_name}")

    run_async(do_update())


@app.command()
def avatar(
    file_path: Path = typer.Argument(..., help="JPEG or PNG image, max 100 KB", exists=True),
):
    """Upload a profile image."""
    async def do_upload():
        async with open_client() as sims:
            require_login(sims)
            profile = await sims.account.upload_avatar(file_path)
            console.print(f"[green]Avatar uploaded:[/green] {profile.profile_image}")

    run_async(do_upload())


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
