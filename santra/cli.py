import logging
from pathlib import Path
from typing import List

import httpx
import typer
from dotenv import load_dotenv
from rich import print, print_json
from rich.markdown import Markdown
from rich.table import Table

from santra.logging_config import SUCCESS, configure_logging
from santra.services.config import get_config
from santra.services.connections import resolve
from santra.services.errors import SantraError
from santra.services.graph_renderer import RenderContext
from santra.services.idea_store import IdeaStore

logger = logging.getLogger("santra.cli")

APP_HELP = """
santra: capture raw ideas, refine them with an LLM, and browse how they connect.

Ideas are stored as markdown files (one per idea) in IDEAS_PATH. `submit`
talks to a running server; `list`, `show` and `graph` read the files directly.
"""

app = typer.Typer(name="santra", help=APP_HELP, no_args_is_help=True)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    load_dotenv()
    configure_logging("DEBUG" if verbose else get_config().log_level)


@app.command()
def serve(
    port: int = typer.Option(None, "--port", "-p", help="Port to listen on (default: PORT or 3000)"),
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
):
    """Run the HTTP API and browser UI."""
    import uvicorn

    port = port or get_config().port
    logger.log(SUCCESS, f"Server running at http://{host}:{port} (UI at /app/)")
    uvicorn.run("santra.api.main:app", host=host, port=port, log_level="info")


@app.command()
def submit(
    idea: List[str] = typer.Argument(..., help="The idea text"),
    server: str = typer.Option("http://localhost:3000", "--server", "-s", help="Server base URL"),
):
    """
    Send an idea to a running server for refinement and storage.

    Examples:
        santra submit "a bike-sharing map for rural towns"
    """
    text = " ".join(idea).strip()
    if not text:
        logger.error('Please provide an idea: santra submit "your idea"')
        raise typer.Exit(code=1)

    logger.info(f"Sending idea to server: {text[:50]}...")
    try:
        response = httpx.post(f"{server.rstrip('/')}/process-idea", json={"idea": text}, timeout=None)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.error(f"Failed to process idea: HTTP {e.response.status_code}: {e.response.text}")
        raise typer.Exit(code=1)
    except httpx.HTTPError as e:
        logger.error(f"Failed to process idea: {e}")
        raise typer.Exit(code=1)

    logger.log(SUCCESS, "Idea processed successfully!")
    print("\n[bold]Processed Result:[/bold]")
    print_json(data=response.json())


@app.command("list")
def list_ideas(json_output: bool = typer.Option(False, "--json", help="Output as JSON")):
    """List stored ideas, newest first."""
    ideas = IdeaStore().list_all()
    if json_output:
        print_json(data=[idea.model_dump() for idea in ideas])
        return
    if not ideas:
        print("[dim]No ideas yet.[/dim]")
        return

    table = Table(title="Ideas")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Tags")
    table.add_column("Created")
    for idea in ideas:
        table.add_row(idea.id, idea.title, ", ".join(idea.tags), idea.created or "")
    print(table)


@app.command()
def show(idea_id: str = typer.Argument(..., help="Idea id")):
    """Print one idea as rendered markdown."""
    try:
        idea = IdeaStore().load_one(idea_id)
    except SantraError as e:
        print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)
    print(f"[bold]{idea.title}[/bold]  [dim]{idea.created or ''}[/dim]")
    if idea.tags:
        print(f"[cyan]Tags:[/cyan] {', '.join(idea.tags)}")
    print(Markdown(idea.content))


@app.command()
def graph(
    svg: Path = typer.Option(None, "--svg", help="Write the laid-out graph as SVG to this file"),
    highlight: str = typer.Option(None, "--highlight", help="Idea id to highlight in the SVG"),
):
    """Show resolved connections between stored ideas."""
    ideas = IdeaStore().list_all()
    data = resolve(ideas)
    titles = {node.id: node.title for node in data.nodes}

    table = Table(title="Connections")
    table.add_column("From", style="bold")
    table.add_column("To", style="bold")
    for link in data.links:
        table.add_row(titles[link.source], titles[link.target])
    print(table)

    context = RenderContext()
    context.render(data)
    node_count, link_count = context.summary()
    print(f"[dim]{node_count}, {link_count}[/dim]")

    if svg:
        if highlight and not context.highlight_node(highlight):
            print(f"[yellow]No idea with id {highlight}[/yellow]")
        svg.write_text(context.to_svg(), encoding="utf-8")
        print(f"[green]Graph written to {svg}[/green]")


if __name__ == "__main__":
    app()
