"""CLI for plainly: admin extraction/drafts and a feed preview."""

import asyncio
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from plainly.config import Settings
from plainly.drafts import DraftService
from plainly.errors import EventValidationError, PlainlyError
from plainly.events import create_event
from plainly.extractors.fetch import normalize_url
from plainly.extractors.pipeline import Extractor
from plainly.models import (
    CAREER_FIELDS,
    DRAFT_STATUSES,
    EVENT_CATEGORIES,
    INTERESTS,
    RISK_TOLERANCES,
    EventDraft,
    PersonalizedEvent,
    UserProfile,
)
from plainly.ranking.selector import EventSelector
from plainly.store.json_store import JSONStore

# Load environment variables (override=True to beat shell env vars)
load_dotenv(override=True)

app = typer.Typer(
    name="plainly",
    help="Event extraction, drafts and personalized feed",
    add_completion=False,
)
console = Console()


def get_settings() -> Settings:
    try:
        return Settings.from_env()
    except PlainlyError as e:
        fail(e)


def get_store(settings: Settings) -> JSONStore:
    try:
        return JSONStore(settings.store_path)
    except PlainlyError as e:
        fail(e)


def fail(error: PlainlyError) -> None:
    """Print an actionable error for `error` and exit 1."""
    console.print(f"[red]Error ({error.stage}): {escape(str(error))}[/red]")
    if isinstance(error, EventValidationError) and error.missing_fields:
        console.print(f"[dim]Fill in: {', '.join(error.missing_fields)}[/dim]")
    raise typer.Exit(1)


def check_choice(value: Optional[str], allowed: list[str], label: str) -> None:
    if value is not None and value not in allowed:
        console.print(f"[red]Invalid {label} {value!r}. Choose from: {', '.join(allowed)}[/red]")
        raise typer.Exit(1)


def print_draft(draft: EventDraft) -> None:
    console.print(f"\n[bold]Draft {draft.id}[/bold] [dim]({draft.status})[/dim]")
    console.print(f"  Source: {draft.source_url}")
    console.print(f"  Title: {draft.title or '-'}")
    console.print(f"  Date: {draft.date or '-'}  Category: {draft.category or '-'}")
    console.print(f"  What happened: {draft.what_happened or '-'}")
    console.print(f"  Why people care: {draft.why_people_care or '-'}")
    console.print(f"  What this means: {draft.what_this_means or '-'}")
    if draft.what_likely_does_not_change:
        console.print(f"  What likely does not change: {draft.what_likely_does_not_change}")


def print_drafts_table(drafts: list[EventDraft]) -> None:
    table = Table(title=f"Drafts ({len(drafts)})")
    table.add_column("ID", style="dim", max_width=36)
    table.add_column("Status", style="yellow")
    table.add_column("Title", style="cyan", max_width=40)
    table.add_column("Category", style="blue")
    table.add_column("Source", style="green", max_width=30)

    for draft in drafts:
        table.add_row(
            draft.id,
            draft.status,
            (draft.title or "-")[:40],
            draft.category or "-",
            draft.source_url[:30],
        )
    console.print(table)


def print_feed_table(events: list[PersonalizedEvent]) -> None:
    table = Table(title=f"Feed ({len(events)} events)")
    table.add_column("Score", style="magenta", justify="right")
    table.add_column("Title", style="cyan", max_width=40)
    table.add_column("Category", style="blue")
    table.add_column("Created", style="dim")

    for event in events:
        score = str(event.relevance_score) if event.relevance_score is not None else "?"
        if event.is_fallback:
            score += "*"
        table.add_row(score, event.title[:40], event.category, event.created_at.date().isoformat())
    console.print(table)
    if any(e.is_fallback for e in events):
        console.print("[dim]* below the relevance threshold, shown as newest fallback[/dim]")


@app.command()
def extract(
    url: str = typer.Argument(..., help="Article URL (https:// added if missing)"),
    save: bool = typer.Option(True, "--save/--no-save", help="Save the result as a draft"),
    admin_id: Optional[str] = typer.Option(None, "--admin", "-a", help="Admin user ID owning the draft"),
):
    """Extract an event summary from an article URL."""
    settings = get_settings()

    async def run() -> None:
        store = get_store(settings)
        service = DraftService(store)
        extractor = Extractor.from_settings(settings)

        source_url = normalize_url(url)
        draft = await service.start(source_url, admin_id=admin_id) if save else None
        try:
            result = await extractor.extract(source_url)
        except PlainlyError:
            if draft is not None:
                await service.reject(draft.id)
            raise

        if draft is None:
            data = result.data
            console.print(f"\n[bold]{data.title}[/bold] [dim]({data.date}, {data.category})[/dim]")
            console.print(f"  What happened: {data.what_happened}")
            console.print(f"  Why people care: {data.why_people_care}")
            console.print(f"  What this means: {data.what_this_means}")
            return

        draft = await service.complete(draft.id, result.data, payload=result.payload)
        print_draft(draft)
        console.print("\n[green]Saved as draft. Review, then run `plainly publish`.[/green]")

    try:
        asyncio.run(run())
    except PlainlyError as e:
        fail(e)


@app.command()
def drafts(
    status: Optional[str] = typer.Option(None, "--status", "-s", help="Filter by status"),
):
    """List drafts, newest first."""
    check_choice(status, DRAFT_STATUSES, "status")
    settings = get_settings()
    try:
        result = asyncio.run(DraftService(get_store(settings)).list_drafts(status))
    except PlainlyError as e:
        fail(e)
    if not result:
        console.print("[yellow]No drafts[/yellow]")
        raise typer.Exit(0)
    print_drafts_table(result)


@app.command()
def edit_draft(
    draft_id: str = typer.Argument(..., help="Draft ID"),
    title: Optional[str] = typer.Option(None, "--title"),
    date: Optional[str] = typer.Option(None, "--date", help="YYYY-MM-DD"),
    category: Optional[str] = typer.Option(None, "--category"),
    what_happened: Optional[str] = typer.Option(None, "--what-happened"),
    why_people_care: Optional[str] = typer.Option(None, "--why-people-care"),
    what_this_means: Optional[str] = typer.Option(None, "--what-this-means"),
    what_likely_does_not_change: Optional[str] = typer.Option(None, "--what-likely-does-not-change"),
):
    """Edit draft fields (only the options given are changed)."""
    fields = {
        "title": title,
        "date": date,
        "category": category,
        "what_happened": what_happened,
        "why_people_care": why_people_care,
        "what_this_means": what_this_means,
        "what_likely_does_not_change": what_likely_does_not_change,
    }
    fields = {k: v for k, v in fields.items() if v is not None}
    settings = get_settings()
    try:
        draft = asyncio.run(DraftService(get_store(settings)).update(draft_id, fields))
    except PlainlyError as e:
        fail(e)
    print_draft(draft)


@app.command()
def publish(
    draft_id: str = typer.Argument(..., help="Draft ID"),
    expires_in_days: Optional[int] = typer.Option(None, "--expires-in-days", "-e", help="Days until the event expires"),
):
    """Publish a draft as an event."""
    settings = get_settings()
    days = expires_in_days if expires_in_days is not None else settings.expires_in_days
    try:
        event, _ = asyncio.run(DraftService(get_store(settings)).publish(draft_id, days))
    except PlainlyError as e:
        fail(e)
    console.print(f"[bold green]Published![/bold green] Event {event.id}")


@app.command()
def reject(draft_id: str = typer.Argument(..., help="Draft ID")):
    """Reject a draft."""
    settings = get_settings()
    try:
        asyncio.run(DraftService(get_store(settings)).reject(draft_id))
    except PlainlyError as e:
        fail(e)
    console.print(f"[yellow]Rejected draft {draft_id}[/yellow]")


@app.command()
def delete_draft(
    draft_id: str = typer.Argument(..., help="Draft ID"),
    confirm: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete a draft."""
    if not confirm:
        typer.confirm(f"Are you sure you want to delete draft '{draft_id}'?", abort=True)
    settings = get_settings()
    try:
        asyncio.run(DraftService(get_store(settings)).delete(draft_id))
    except PlainlyError as e:
        fail(e)
    console.print(f"[dim]Deleted draft {draft_id}[/dim]")


@app.command()
def add_event(
    title: str = typer.Option(..., "--title"),
    category: str = typer.Option(..., "--category"),
    what_happened: str = typer.Option(..., "--what-happened"),
    why_people_care: str = typer.Option(..., "--why-people-care"),
    what_this_means: str = typer.Option(..., "--what-this-means"),
    what_likely_does_not_change: Optional[str] = typer.Option(None, "--what-likely-does-not-change"),
    date: Optional[str] = typer.Option(None, "--date", help="YYYY-MM-DD (default: today)"),
    expires_in_days: Optional[int] = typer.Option(None, "--expires-in-days", "-e"),
):
    """Create an event manually."""
    settings = get_settings()
    fields = {
        "title": title,
        "date": date,
        "category": category,
        "what_happened": what_happened,
        "why_people_care": why_people_care,
        "what_this_means": what_this_means,
        "what_likely_does_not_change": what_likely_does_not_change,
    }
    days = expires_in_days if expires_in_days is not None else settings.expires_in_days
    try:
        event = asyncio.run(create_event(get_store(settings), fields, days))
    except PlainlyError as e:
        fail(e)
    console.print(f"Event ID: {event.id}")


@app.command()
def profile(
    user_id: str = typer.Argument(..., help="User ID"),
    country: str = typer.Option("", "--country", "-c"),
    career: str = typer.Option("other", "--career"),
    interests: list[str] = typer.Option([], "--interest", "-i", help="Repeat for several"),
    risk: str = typer.Option("medium", "--risk"),
    email: Optional[str] = typer.Option(None, "--email"),
    is_admin: bool = typer.Option(False, "--admin", help="Grant admin rights"),
):
    """Create or update a user's onboarding profile."""
    check_choice(career, CAREER_FIELDS, "career")
    check_choice(risk, RISK_TOLERANCES, "risk tolerance")
    for interest in interests:
        check_choice(interest, INTERESTS, "interest")

    settings = get_settings()
    user = UserProfile(
        id=user_id,
        email=email,
        country=country.strip(),
        career_field=career,
        interests=list(dict.fromkeys(interests)),
        risk_tolerance=risk,
        onboarding_completed=True,
        is_admin=is_admin,
    )
    try:
        saved = asyncio.run(get_store(settings).upsert_user_profile(user))
    except PlainlyError as e:
        fail(e)
    console.print(f"[green]Saved profile {saved.id}[/green] [dim]({saved.career_field}, {saved.country or 'no country'})[/dim]")


@app.command()
def feed(
    user_id: str = typer.Argument(..., help="User ID"),
    top: int = typer.Option(0, "--top", "-n", help="Show the top N ranked events instead of the active one"),
):
    """Show what a user would see right now."""
    settings = get_settings()
    selector = EventSelector.from_settings(get_store(settings), settings)

    try:
        if top > 0:
            events = asyncio.run(selector.select_top_n(user_id, top))
        else:
            active = asyncio.run(selector.select_active_event(user_id))
            events = [active] if active else []
    except PlainlyError as e:
        fail(e)

    if not events:
        console.print("[yellow]Nothing to show (no profile or no active events)[/yellow]")
        raise typer.Exit(0)

    if top > 0:
        print_feed_table(events)
        return

    event = events[0]
    console.print(f"\n[bold]{event.title}[/bold] [dim]({event.date}, {event.category}, score {event.relevance_score})[/dim]")
    console.print(f"\n[bold]What happened[/bold]\n{event.what_happened}")
    console.print(f"\n[bold]Why people care[/bold]\n{event.why_people_care}")
    console.print(f"\n[bold]What this means for you[/bold]\n{event.personalized_what_this_means}")
    if event.what_likely_does_not_change:
        console.print(f"\n[bold]What likely does not change[/bold]\n{event.what_likely_does_not_change}")
    console.print(f"\n[dim]Expires in {event.days_until_expiry()} days[/dim]")


@app.command()
def stats():
    """Show store statistics."""
    settings = get_settings()
    store = get_store(settings)
    summary = store.stats()
    console.print("\n[bold]Store Statistics[/bold]")
    console.print(f"  Path: {store.store_path}")
    console.print(f"  Profiles: {summary['profiles']}")
    console.print(f"  Events: {summary['events']}")
    console.print(f"  Read receipts: {summary['reads']}")
    console.print(f"  Drafts: {summary['drafts']} {summary['drafts_by_status']}")
    console.print(f"  Categories: {', '.join(EVENT_CATEGORIES)}")


if __name__ == "__main__":
    app()
