import os
import sys
import click
from rich import print
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich import box

from petcli.controller import Controller, run_ui
from petcli.model import RecordStore, StorageError, init_db
from petcli.petcli_env import PetcliEnvironment
from petcli.shared import bug_msg
from petcli.terminal import TerminalError
from petcli.versioning import get_version

VERSION = get_version()


def make_store(ctx) -> RecordStore:
    config = ctx.obj["CONFIG"]
    return RecordStore(ctx.obj["DB"], config.records)


def records_table(records) -> Table:
    table = Table(box=box.SIMPLE_HEAD)
    for column in ("#", "ID", "Name", "Category", "Age", "Created At"):
        table.add_column(column)
    for i, record in enumerate(records):
        table.add_row(
            str(i),
            str(record.id),
            record.name,
            record.category,
            str(record.age),
            record.created_at.strftime("%Y-%m-%d %H:%M:%S %Z").strip(),
        )
    return table


@click.group(invoke_without_command=True)
@click.version_option(VERSION, prog_name="petcli", message="%(prog)s version %(version)s")
@click.option(
    "--home",
    help="Override the petcli workspace directory (equivalent to setting $PETCLI_HOME).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx, home, verbose):
    """Petcli – keep a list of pets in your terminal."""
    if home:
        os.environ["PETCLI_HOME"] = (
            home  # Must be set before PetcliEnvironment is instantiated
        )

    env = PetcliEnvironment()
    env.ensure(init_config=True, init_db_fn=init_db)
    config = env.load_config()

    ctx.ensure_object(dict)
    ctx.obj["ENV"] = env
    ctx.obj["DB"] = env.db_path
    ctx.obj["CONFIG"] = config
    ctx.obj["VERBOSE"] = verbose

    if ctx.invoked_subcommand is None:
        ctx.invoke(ui)


@cli.command()
@click.pass_context
def ui(ctx):
    """Launch the interactive pet list."""
    db = ctx.obj["DB"]
    verbose = ctx.obj["VERBOSE"]

    if verbose:
        print(f"[blue]Launching UI with database:[/blue] {db}")

    controller = Controller(make_store(ctx), ctx.obj["CONFIG"].ui)
    try:
        run_ui(controller)
    except (StorageError, TerminalError, IndexError) as e:
        bug_msg(f"session ended by {type(e).__name__}: {e}")
        print(f"[red]✘ {escape(str(e))}[/red]")
        sys.exit(1)


@cli.command(name="list")
@click.pass_context
def list_records(ctx):
    """Print the stored pets."""
    try:
        records = make_store(ctx).load_all()
    except StorageError as e:
        print(f"[red]✘ {escape(str(e))}[/red]")
        sys.exit(1)

    if not records:
        print("[yellow]No pets stored.[/yellow]")
        return
    Console().print(records_table(records))


@cli.command()
@click.option("--count", "-n", default=1, show_default=True, type=click.IntRange(min=1))
@click.pass_context
def add(ctx, count):
    """Add randomly generated pets."""
    store = make_store(ctx)
    try:
        for _ in range(count):
            record = store.append_random()[-1]
            print(
                f"[green]✔ Added:[/green] {record.name} ({record.category}, age {record.age}, id {record.id})"
            )
    except StorageError as e:
        print(f"[red]✘ {escape(str(e))}[/red]")
        sys.exit(1)


@cli.command()
@click.argument("index", type=int)
@click.pass_context
def remove(ctx, index):
    """Remove the pet at INDEX (as shown by `petcli list`)."""
    try:
        make_store(ctx).remove_at(index)
    except (StorageError, IndexError) as e:
        print(f"[red]✘ {escape(str(e))}[/red]")
        sys.exit(1)
    print(f"[green]✔ Removed pet {index}.[/green]")


if __name__ == "__main__":
    cli()
