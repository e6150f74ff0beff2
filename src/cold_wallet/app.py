"""
Cold Wallet - Offline multi-chain key vault

Command-line entry point.

Usage:
    cold-wallet [OPTIONS] COMMAND [ARGS]...
"""

import functools
import json
import logging
from contextlib import contextmanager
from typing import Iterator

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from cold_wallet import __version__
from cold_wallet.config import WalletConfig
from cold_wallet.models.store import VaultStore
from cold_wallet.networks import supported_networks
from cold_wallet.services.logging import configure_logging
from cold_wallet.wallet.errors import ErrorKind, WalletError
from cold_wallet.wallet.manager import EXPORT_JSON_INDENT, WalletManager

console = Console()
err_console = Console(stderr=True)

PASSPHRASE_ENV_VAR = "COLD_WALLET_PASSPHRASE"

# One process exit code per error kind (1 and 2 belong to click)
EXIT_CODES = {
    ErrorKind.INVALID_PHRASE: 3,
    ErrorKind.WALLET_EXISTS: 4,
    ErrorKind.WRONG_PASSPHRASE: 5,
    ErrorKind.NO_WALLET: 6,
    ErrorKind.STORAGE: 7,
    ErrorKind.RANDOM_SOURCE: 8,
    ErrorKind.ENTROPY: 9,
    ErrorKind.DERIVATION: 10,
}

FORCE_WARNING = "This permanently deletes the existing wallet. Continue?"


def handle_wallet_errors(f):
    """Print a WalletError as one line and exit with its mapped code."""
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except WalletError as e:
            err_console.print(f"[red]Error:[/red] {escape(e.message)}")
            click.get_current_context().exit(EXIT_CODES[e.kind])
    return wrapper


def passphrase_option(confirm: bool = False):
    return click.option(
        "--passphrase",
        envvar=PASSPHRASE_ENV_VAR,
        prompt="Passphrase",
        hide_input=True,
        confirmation_prompt=confirm,
        help=f"Encryption passphrase (or set {PASSPHRASE_ENV_VAR})",
    )


force_option = click.option(
    "--force", is_flag=True, help="Replace an existing wallet (destructive)"
)
yes_option = click.option(
    "--yes", "-y", is_flag=True, help="Skip the confirmation for --force"
)


@contextmanager
def open_manager(ctx: click.Context) -> Iterator[WalletManager]:
    config: WalletConfig = ctx.obj["config"]
    with VaultStore(config.db_path) as store:
        yield WalletManager(store, config)


def confirm_force(force: bool, yes: bool) -> None:
    if force and not yes:
        click.confirm(FORCE_WARNING, abort=True)


def show_phrase(phrase: str, title: str) -> None:
    console.print(Panel(
        "Write these words down in order and keep them offline.\n"
        "Anyone holding them controls every key in this wallet.",
        title=title,
        border_style="yellow",
    ))
    # Plain output keeps the phrase on one unwrapped line
    click.echo(phrase)


# ============================================
# Command Group
# ============================================

@click.group()
@click.version_option(version=__version__, message="%(prog)s %(version)s")
@click.option("--home", type=click.Path(file_okay=False),
              help="Wallet home directory (default: $COLD_WALLET_HOME or ~/.coldWallet)")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, home: str | None, verbose: bool):
    """Cold Wallet - Offline multi-chain key vault."""
    ctx.ensure_object(dict)

    try:
        config = WalletConfig.load(home)
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    level = logging.DEBUG if verbose else config.log_level
    logs_dir = config.logs_dir if config.log_retention_days > 0 else None
    configure_logging(level, config.log_retention_days, logs_dir)

    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose


@cli.command()
@force_option
@yes_option
@passphrase_option(confirm=True)
@click.pass_context
@handle_wallet_errors
def create(ctx, force: bool, yes: bool, passphrase: str):
    """Create a wallet from a new seed phrase."""
    confirm_force(force, yes)

    with open_manager(ctx) as manager:
        phrase = manager.create(passphrase, force=force)

    console.print("[green]✓ Wallet created[/green]")
    show_phrase(phrase, "Seed phrase backup")


@cli.command("import")
@click.argument("phrase", nargs=-1)
@force_option
@yes_option
@passphrase_option(confirm=True)
@click.pass_context
@handle_wallet_errors
def import_cmd(ctx, phrase: tuple[str, ...], force: bool, yes: bool, passphrase: str):
    """Restore a wallet from a 12-word seed phrase."""
    text = " ".join(phrase)
    if not text:
        text = click.prompt("Seed phrase", hide_input=True)
    confirm_force(force, yes)

    with open_manager(ctx) as manager:
        manager.import_wallet(text, passphrase, force=force)

    console.print("[green]✓ Wallet imported[/green]")


cli.add_command(import_cmd, name="restore")


@cli.command()
@click.option("--network", type=click.Choice([n.name for n in supported_networks()]),
              help="Only export keys for this network")
@click.option("--output", "-o", type=click.Path(dir_okay=False),
              help="Write JSON to this file instead of stdout")
@passphrase_option()
@click.pass_context
@handle_wallet_errors
def export(ctx, network: str | None, output: str | None, passphrase: str):
    """Export public extended keys as JSON."""
    with open_manager(ctx) as manager:
        if output:
            try:
                keys = manager.export_file(output, passphrase, network)
            except OSError as e:
                raise click.ClickException(f"Cannot write {output}: {e}") from e
            console.print(f"[green]✓ Exported {len(keys)} public keys to {escape(output)}[/green]")
        else:
            keys = manager.export(passphrase, network)
            click.echo(json.dumps(keys, indent=EXPORT_JSON_INDENT))


@cli.command()
@passphrase_option()
@click.pass_context
@handle_wallet_errors
def backup(ctx, passphrase: str):
    """Show the stored seed phrase."""
    with open_manager(ctx) as manager:
        phrase = manager.backup(passphrase)
    show_phrase(phrase, "Seed phrase")


@cli.command()
@click.pass_context
@handle_wallet_errors
def status(ctx):
    """Show storage location and record counts. Decrypts nothing."""
    config: WalletConfig = ctx.obj["config"]

    with open_manager(ctx) as manager:
        record_count = manager.store.count()
        has_wallet = manager.has_wallet_record()

    console.print("\n[bold blue]Cold Wallet Status[/bold blue]\n")
    console.print(f"Home: [cyan]{escape(str(config.app_dir))}[/cyan]")
    console.print(f"Storage: [cyan]{escape(str(config.db_path))}[/cyan]")
    console.print(f"Records: {record_count}")
    if has_wallet:
        console.print("Wallet: [green]present[/green]")
    else:
        console.print("Wallet: [yellow]none[/yellow]")
    console.print()


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
