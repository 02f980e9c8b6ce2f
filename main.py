# Copyright (c) 2025 Trae AI. All rights reserved.

import typer
from src.cli.main import app as cli_app

app = typer.Typer(help="MediaScore - IMDB, Rotten Tomatoes and Metacritic ratings for your media files.")

# Add CLI commands
app.registered_commands.extend(cli_app.registered_commands)

if __name__ == "__main__":
    app()
