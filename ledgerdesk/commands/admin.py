"""Admin commands for init, backup and configuration."""

import shutil
import sqlite3
from datetime import datetime
from pathlib import Path

from rich.table import Table

from ledgerdesk.commands.common import console, fail
from ledgerdesk.config import create_default_config, get_config_path, load_settings, set_value
from ledgerdesk.domain.errors import ValidationError
from ledgerdesk.domain.schedule import parse_clock
from ledgerdesk.store.schema import get_db_path, init_database


def backup_command(output_dir: str | None = None) -> None:
    """Backup database and configuration files."""
    db_path = get_db_path()
    config_path = get_config_path()

    if not db_path.exists():
        fail("Database not found. Run 'ledgerdesk init' first.")

    if output_dir:
        backup_dir = Path(output_dir).expanduser()
    else:
        backup_dir = Path.home() / ".ledgerdesk" / "backups"

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    db_backup = backup_dir / f"ledgerdesk_{timestamp}.db"
    config_backup = backup_dir / f"config_{timestamp}.toml"

    try:
        backup_dir.mkdir(parents=True, exist_ok=True)

        shutil.copy2(db_path, db_backup)
        console.print(f"[green]✓[/green] Database backed up to: {db_backup}")

        # Config is optional; defaults apply without it
        if config_path.exists():
            shutil.copy2(config_path, config_backup)
            console.print(f"[green]✓[/green] Config backed up to: {config_backup}")

    except OSError as e:
        fail(f"Backup failed: {e}")

    console.print("\n[green]Backup complete![/green]", style="bold")
    console.print(f"[dim]Backup directory: {backup_dir}[/dim]")


def init_command(force: bool = False) -> None:
    """Initialize ledgerdesk database and configuration."""
    db_path = get_db_path()
    config_path = get_config_path()

    db_exists = db_path.exists()
    config_exists = config_path.exists()

    try:
        # Existing database: only bring its schema up to date
        if db_exists and not force:
            console.print(f"[cyan]Database already exists at {db_path}, updating schema...[/cyan]")
            init_database(db_path)
            console.print("[green]✓[/green] Database schema is up to date")
        else:
            if db_exists:
                db_path.unlink()
            console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
            init_database(db_path)
            console.print("[green]✓[/green] Database initialized")

        if config_exists and not force:
            console.print(f"[dim]Keeping existing config: {config_path}[/dim]")
        else:
            create_default_config(config_path)
            console.print(f"[green]✓[/green] Config file created at {config_path} (permissions: 600)")

    except sqlite3.Error as e:
        fail(f"Database error: {e}")
    except OSError as e:
        fail(f"Filesystem error: {e}")

    console.print("\n[green]Initialization complete![/green]", style="bold")


def flatten(settings: dict, prefix: str = "") -> list[tuple[str, object]]:
    """Flatten nested settings into dotted keys."""
    items: list[tuple[str, object]] = []
    for key, value in settings.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            items.extend(flatten(value, f"{dotted}."))
        else:
            items.append((dotted, value))
    return items


def config_show_command() -> None:
    """Show effective settings (defaults merged with the config file)."""
    try:
        settings = load_settings()
    except OSError as e:
        fail(f"Cannot read config: {e}")

    table = Table(title=str(get_config_path()))
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    for key, value in flatten(settings):
        table.add_row(key, str(value))

    console.print(table)


def config_set_command(key: str, value: str) -> None:
    """Set a config value. Integer-looking values are stored as integers."""
    known = dict(flatten(load_settings()))
    if key not in known:
        fail(f"Unknown config key '{key}'")

    parsed: object = int(value) if isinstance(known[key], int) and value.lstrip("-").isdigit() else value
    if isinstance(known[key], int) and not isinstance(parsed, int):
        fail(f"'{key}' must be a whole number")

    if key == "default_start_time":
        try:
            parsed = parse_clock(value)
        except ValidationError as e:
            fail(str(e))

    try:
        set_value(key, parsed)
    except OSError as e:
        fail(f"Cannot write config: {e}")

    console.print(f"[green]✓[/green] {key} = {parsed}")
