# emoji_dictionary/main.py

from pathlib import Path

import click

from emoji_dictionary.cli.main import emoji
from emoji_dictionary.core.storage import DEFAULT_STORE_PATH


@click.group(context_settings=dict(help_option_names=['-h', '--help']))
def main():
    """
    Emoji Dictionary: your personal, searchable emoji collection.

    Run the desktop app with the 'gui' command, or use the 'cli' command
    followed by its own sub-commands.

    Example (GUI): python -m emoji_dictionary.main gui
    Example (CLI): python -m emoji_dictionary.main cli list --category Food
    """
    pass


@click.command()
@click.option('--store', 'store_path', type=click.Path(dir_okay=False, path_type=Path),
              default=DEFAULT_STORE_PATH, show_default=True, help="The JSON file holding your emojis.")
def gui(store_path: Path):
    """🎨 Launches the desktop application."""
    # PySide6 is only imported when the window is actually wanted.
    from emoji_dictionary.gui.main_window import run_gui
    run_gui(store_path)


main.add_command(gui)
main.add_command(emoji, name='cli')

if __name__ == '__main__':
    main()
