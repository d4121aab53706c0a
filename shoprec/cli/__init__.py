"""CLI commands for shoprec."""

import typer
from dotenv import load_dotenv

from ..const import BASE_DIR
from .algorithms_cmd import algorithms
from .recommend_cmd import recommend

# Load environment variables before creating the app
load_dotenv(BASE_DIR / ".env")

app = typer.Typer(help="CLI entry point for shoprec.")

# Register commands
app.command(help="Train the selected recommender and print recommended product ids.")(recommend)
app.command(help="List the registered recommender algorithms.")(algorithms)


@app.callback()
def main() -> None:
    """Recommender management commands."""
    pass


__all__ = ["app", "algorithms", "recommend"]
