"""
Post Feed: Main CLI Application

Renders a user's posts and their comments into an HTML page, with
collapsible comment sections.
"""

import asyncio
import logging
import os
from typing import List, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from . import feed_client
from .dom import DATA_POST_ID
from .models import CycleResult, NotFound
from .orchestrator import FeedOrchestrator
from .parser import parse_post_id
from .session import FeedSession


load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
    filename=os.getenv("FEED_LOG_FILE", "app.log"),
    filemode='a'
)

app = typer.Typer(
    help="A CLI tool to render a user's posts and comments from a REST API."
)
console = Console(stderr=True)


def _get_timeout() -> Optional[float]:
    """Reads FEED_FETCH_TIMEOUT; unset or invalid means no timeout."""
    raw = os.getenv("FEED_FETCH_TIMEOUT")
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        logging.warning(f"Ignoring invalid FEED_FETCH_TIMEOUT={raw!r}")
        return None


def build_client(api_url: Optional[str]) -> feed_client.AsyncResourceClient:
    base_url = api_url or os.getenv("FEED_API_URL") or feed_client.API_URL
    client = feed_client.ResourceClient(base_url=base_url, timeout=_get_timeout())
    return feed_client.AsyncResourceClient(client)


def _toggle(session: FeedSession, post_id: int) -> None:
    trigger = session.container.select_one(f'button[{DATA_POST_ID}="{post_id}"]')
    if trigger is None:
        console.print(f"[bold yellow]Post {post_id} is not on the page.[/bold yellow]")
        logging.warning(f"Toggle requested for post {post_id}, which is not rendered")
        return
    for result in session.document.click(trigger):
        if isinstance(result, NotFound):
            console.print(f"[bold yellow]Post {post_id} has no comment section.[/bold yellow]")


def _print_feed(session: FeedSession, result: CycleResult) -> None:
    table = Table(title=f"Posts for user {result.user_id}")
    table.add_column("Post ID", style="cyan")
    table.add_column("Title", style="magenta")
    table.add_column("Author", style="green")
    table.add_column("Comments", style="green")
    table.add_column("Shown", style="yellow")

    for post_id in result.post_ids:
        entry = session.registry.get(post_id)
        if entry is None:
            continue
        article = entry.section.parent
        title = article.find("h2").get_text(strip=True)
        if len(title) > 50:
            title = title[:47] + "..."
        author = next(
            (p.get_text(strip=True) for p in article.find_all("p", recursive=False)
             if p.get_text(strip=True).startswith("Author: ")),
            "N/A",
        )
        table.add_row(
            str(post_id),
            title,
            author.removeprefix("Author: "),
            str(len(entry.section.find_all("article"))),
            "yes" if entry.visible else "no",
        )

    console.print(table)


def _write_page(session: FeedSession, output_file: str) -> None:
    console.print(f"Saving page to [bold yellow]{output_file}[/bold yellow]...")
    try:
        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(session.document.render())
    except IOError as e:
        console.print(f"[bold red]Error saving file:[/bold red] {e}")


@app.command()
def users(
    api_url: Optional[str] = typer.Option(None, help="Base URL of the API (overrides FEED_API_URL)."),
):
    """
    Lists the users that can be selected.
    """
    client = build_client(api_url)
    session = FeedSession()
    orchestrator = FeedOrchestrator(session, client)

    found = asyncio.run(orchestrator.init_page())
    if not found:
        console.print("[bold red]Error:[/bold red] Could not load users. Check the API URL or your connection.")
        raise typer.Exit(code=1)

    table = Table(title="Users")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="magenta")
    table.add_column("Company", style="green")
    for user in found:
        table.add_row(str(user.id), user.name, user.company_name)
    console.print(table)


@app.command()
def show(
    user_id: int = typer.Argument(..., help="The id of the user whose posts to render."),
    expand: List[int] = typer.Option([], "--expand", "-e", help="Post id whose comments start expanded. Repeatable."),
    output: str = typer.Option("feed.html", "--output", "-o", help="Where to write the rendered page."),
    api_url: Optional[str] = typer.Option(None, help="Base URL of the API (overrides FEED_API_URL)."),
):
    """
    Renders one user's posts and writes the page.
    """
    console.print(f"[bold cyan]Post Feed v1.0[/bold cyan]")
    client = build_client(api_url)
    session = FeedSession()
    orchestrator = FeedOrchestrator(session, client)

    async def _run() -> CycleResult:
        await orchestrator.init_page()
        return await orchestrator.on_selection_change(user_id)

    with console.status("[cyan]Fetching posts and comments..."):
        result = asyncio.run(_run())

    if result is None or not result.committed:
        reason = result.reason if result else "busy"
        console.print(f"[bold red]Error:[/bold red] Could not render user {user_id}: {reason}")
        raise typer.Exit(code=1)

    for post_id in expand:
        _toggle(session, post_id)

    _print_feed(session, result)
    _write_page(session, output)
    console.print(f"[bold green]✓ Done![/bold green] Rendered [bold blue]{len(result.post_ids)}[/bold blue] posts.")


@app.command()
def browse(
    output: str = typer.Option("feed.html", "--output", "-o", help="Where to write the rendered page on exit."),
    api_url: Optional[str] = typer.Option(None, help="Base URL of the API (overrides FEED_API_URL)."),
):
    """
    Interactively switches between users and toggles comment sections.
    """
    console.print(f"[bold cyan]Post Feed v1.0[/bold cyan]")
    client = build_client(api_url)
    session = FeedSession()
    orchestrator = FeedOrchestrator(session, client)

    found = asyncio.run(orchestrator.init_page())
    console.print(f"Loaded [bold blue]{len(found)}[/bold blue] users.")

    try:
        while True:
            selection = typer.prompt("User ID (blank to quit)", default="", show_default=False)
            if not selection:
                break
            result = asyncio.run(orchestrator.on_selection_change(selection))
            if result is None or not result.committed:
                reason = result.reason if result else "busy"
                console.print(f"[bold yellow]Nothing rendered:[/bold yellow] {reason}")
                continue
            _print_feed(session, result)

            while True:
                raw = typer.prompt("Toggle post ID (blank for next user)", default="", show_default=False)
                if not raw:
                    break
                post_id = parse_post_id(raw)
                if post_id is None:
                    console.print(f"[bold yellow]Not a post id:[/bold yellow] {raw}")
                    continue
                _toggle(session, post_id)
                _print_feed(session, result)
    except typer.Abort:
        console.print("\nStopped by user.")

    _write_page(session, output)


if __name__ == "__main__":
    app()
