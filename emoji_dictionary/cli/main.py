# emoji_dictionary/cli/main.py

import logging
import uuid
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from emoji_dictionary.core.bulk_importer import BulkImporter
from emoji_dictionary.core.emoji import (
    Emoji, ValidationError, categories, new_record, parse_category, share_text, validate_fields,
)
from emoji_dictionary.core.emoji_collection import EmojiCollection, FilterState
from emoji_dictionary.core.storage import DEFAULT_STORE_PATH, JsonFileStore
from emoji_dictionary.utils.logger import setup_logging

console = Console()
logger = logging.getLogger(__name__)

CATEGORY_CHOICE = click.Choice([c.value for c in categories()], case_sensitive=False)


# --- Helpers ---

def _fail(message: str):
    console.print(f"[bold red]❌ {escape(message)}[/bold red]")
    raise click.exceptions.Exit(1)


def _open_collection(ctx: click.Context) -> EmojiCollection:
    """Builds the collection for the store selected on the command line and loads it."""
    collection = EmojiCollection(JsonFileStore(ctx.obj["store_path"]))
    collection.load()
    return collection


def _check_saved(collection: EmojiCollection):
    if collection.last_persistence_error is not None:
        console.print(f"[yellow]⚠️ Changes could not be saved: {collection.last_persistence_error}[/yellow]")


def _resolve_id(collection: EmojiCollection, token: str) -> Emoji:
    """Finds a record by its full id or by a prefix that only one id starts with."""
    try:
        found = collection.get(uuid.UUID(token))
        if found is not None:
            return found
    except ValueError:
        pass
    prefix = token.strip().lower()
    matches = [e for e in collection.emojis if prefix and str(e.id).startswith(prefix)]
    if not matches:
        _fail(f"No emoji has an id starting with '{token}'.")
    if len(matches) > 1:
        _fail(f"'{token}' matches {len(matches)} emojis. Use a longer id prefix.")
    return matches[0]


def _build_table(emojis, title: str) -> Table:
    table = Table(title=title, style="cyan", title_style="bold magenta")
    table.add_column("#", style="bold", justify="right")
    table.add_column("Emoji")
    table.add_column("Description", style="green")
    table.add_column("Category", style="blue")
    table.add_column("Fav", justify="center")
    table.add_column("Created", style="yellow")
    table.add_column("ID", style="dim", no_wrap=True)
    for index, emoji in enumerate(emojis):
        table.add_row(
            str(index),
            escape(emoji.symbol),
            escape(emoji.description),
            emoji.category.value,
            "⭐" if emoji.is_favorite else "",
            emoji.created_at.astimezone().strftime("%Y-%m-%d %H:%M"),
            str(emoji.id)[:8],
        )
    return table


# --- Main Command Group ---

@click.group(context_settings=dict(help_option_names=['-h', '--help']))
@click.version_option(version="1.0", prog_name="Emoji Dictionary")
@click.option('--store', 'store_path', type=click.Path(dir_okay=False, path_type=Path),
              default=DEFAULT_STORE_PATH, show_default=True, help="The JSON file holding your emojis.")
@click.pass_context
def emoji(ctx: click.Context, store_path: Path):
    """
    📚 Emoji Dictionary - browse, search and curate your personal emoji collection.

    Use `[COMMAND] --help` for more information on a specific command.
    """
    setup_logging(console_level=logging.WARNING)
    ctx.ensure_object(dict)
    ctx.obj["store_path"] = store_path


@emoji.command(name="list")
@click.option('-s', '--search', default="", help="Only show emojis whose description, symbol or category contains this text.")
@click.option('-c', '--category', type=CATEGORY_CHOICE, default=None, help="Only show emojis of this category.")
@click.pass_context
def list_emojis(ctx: click.Context, search: str, category: str | None):
    """🔎 Lists the emojis, optionally filtered. The # column is used by `remove`."""
    collection = _open_collection(ctx)
    view = collection.filtered_view(FilterState(search, parse_category(category) if category else None))
    if not view:
        console.print("[yellow]No emojis found. Try another search term or add a new emoji.[/yellow]")
        return
    console.print(_build_table(view, f"Emoji Dictionary ({len(view)} of {len(collection)})"))


@emoji.command()
@click.argument('symbol')
@click.argument('description')
@click.option('-c', '--category', type=CATEGORY_CHOICE, default="Smileys", show_default=True,
              help="The category of the new emoji.")
@click.option('--favorite', is_flag=True, help="Mark the new emoji as a favorite.")
@click.pass_context
def add(ctx: click.Context, symbol: str, description: str, category: str, favorite: bool):
    """➕ Adds a new emoji to the end of the list."""
    try:
        symbol, description, parsed_category = validate_fields(symbol, description, category)
    except ValidationError as e:
        _fail(str(e))
    collection = _open_collection(ctx)
    added = collection.add(new_record(symbol, description, parsed_category, favorite))
    _check_saved(collection)
    console.print(f"[bold green]✅ Added {escape(added.symbol)} '{escape(added.description)}' ({str(added.id)[:8]}).[/bold green]")


@emoji.command()
@click.argument('indices', nargs=-1, type=int)
@click.option('--id', 'ids', multiple=True, help="Remove the emoji with this id (or unique id prefix).")
@click.option('-s', '--search', default="", help="The search text the indices refer to.")
@click.option('-c', '--category', type=CATEGORY_CHOICE, default=None, help="The category filter the indices refer to.")
@click.pass_context
def remove(ctx: click.Context, indices, ids, search: str, category: str | None):
    """
    🗑️ Removes emojis by their # in `list` (under the same filter) or by id.
    """
    if not indices and not ids:
        _fail("Give at least one index or --id to remove.")
    collection = _open_collection(ctx)
    removed = 0
    if indices:
        current_filter = FilterState(search, parse_category(category) if category else None)
        try:
            removed += collection.remove_at(indices, current_filter)
        except IndexError as e:
            _fail(str(e))
    for token in ids:
        if collection.remove_by_id(_resolve_id(collection, token).id):
            removed += 1
    _check_saved(collection)
    console.print(f"[bold green]✅ Removed {removed} emoji(s).[/bold green]")


@emoji.command()
@click.argument('emoji_id')
@click.pass_context
def favorite(ctx: click.Context, emoji_id: str):
    """⭐ Toggles the favorite mark of an emoji."""
    collection = _open_collection(ctx)
    target = _resolve_id(collection, emoji_id)
    collection.toggle_favorite(target.id)
    _check_saved(collection)
    state = "now a favorite" if collection.get(target.id).is_favorite else "no longer a favorite"
    console.print(f"{escape(target.symbol)} is {state}.")


@emoji.command()
@click.argument('emoji_id')
@click.argument('text')
@click.pass_context
def edit(ctx: click.Context, emoji_id: str, text: str):
    """✏️ Replaces the description of an emoji."""
    collection = _open_collection(ctx)
    target = _resolve_id(collection, emoji_id)
    try:
        collection.update_description(target.id, text)
    except ValidationError as e:
        _fail(str(e))
    _check_saved(collection)
    console.print(f"[bold green]✅ {escape(target.symbol)} is now '{escape(collection.get(target.id).description)}'.[/bold green]")


@emoji.command()
@click.argument('emoji_id')
@click.pass_context
def duplicate(ctx: click.Context, emoji_id: str):
    """📄 Appends a copy of an emoji to the end of the list."""
    collection = _open_collection(ctx)
    copy = collection.duplicate(_resolve_id(collection, emoji_id).id)
    _check_saved(collection)
    console.print(f"[bold green]✅ Created {escape(copy.symbol)} '{escape(copy.description)}' ({str(copy.id)[:8]}).[/bold green]")


@emoji.command()
@click.argument('sources', nargs=-1, type=int, required=True)
@click.option('--to', 'destination', type=int, required=True,
              help="The position (in the unfiltered list) the emojis are moved in front of.")
@click.pass_context
def move(ctx: click.Context, sources, destination: int):
    """↕️ Reorders emojis using their # in the unfiltered `list`."""
    collection = _open_collection(ctx)
    try:
        collection.move(sources, destination)
    except IndexError as e:
        _fail(str(e))
    _check_saved(collection)
    console.print("[bold green]✅ Order updated.[/bold green]")


@emoji.command()
@click.argument('emoji_id')
@click.pass_context
def share(ctx: click.Context, emoji_id: str):
    """📤 Prints an emoji the way it is copied or shared."""
    collection = _open_collection(ctx)
    click.echo(share_text(_resolve_id(collection, emoji_id)))


@emoji.command()
@click.pass_context
def reset(ctx: click.Context):
    """🔄 Replaces your whole collection with the sample emojis."""
    click.confirm("This deletes every emoji you added or changed. Are you sure?", abort=True)
    collection = _open_collection(ctx)
    collection.reset_to_sample()
    _check_saved(collection)
    console.print(f"[bold green]✅ Collection reset to {len(collection)} sample emojis.[/bold green]")


@emoji.command(name="import")
@click.argument('csv_path', type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=Path))
@click.pass_context
def bulk_import(ctx: click.Context, csv_path: Path):
    """📥 Bulk imports emojis from a CSV file (columns: emoji, description, category, favorite)."""
    console.print(f"[bold cyan]Starting bulk import from '{csv_path.name}'...[/bold cyan]")
    collection = _open_collection(ctx)
    importer = BulkImporter(collection)
    importer.process_csv(csv_path)
    report = importer.report
    _check_saved(collection)

    table = Table(title="Import Summary", show_header=False)
    table.add_column("Status", style="cyan")
    table.add_column("Count", style="bold magenta")
    table.add_row("Emojis Added", str(len(report["added"])))
    if report["duplicates"]: table.add_row("Duplicates Skipped", str(len(report["duplicates"])))
    if report["errors"]: table.add_row("[red]Errors Encountered[/red]", str(len(report["errors"])))
    console.print(table)
    for message in report["errors"]:
        console.print(f"[red]  {escape(message)}[/red]")
