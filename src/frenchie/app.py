"""Interactive CLI application."""
import logging
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from frenchie.catalog import CatalogError, items_in_collection, list_collections, load_catalog
from frenchie.dashboard import get_learning_stats, get_mastery_color, get_mastery_label
from frenchie.db import DEFAULT_DB_PATH, KeyValueStore
from frenchie.importer import import_file
from frenchie.learning_queue import build_learning_queue
from frenchie.models import ProgressMap, StreakState, VocabularyItem
from frenchie.progress import (
    load_current_index, load_progress, mark_forgot, mark_remembered,
    mark_very_familiar, reset_progress, restore_from_familiar, save_current_index,
)
from frenchie.review import list_familiar, list_forgotten
from frenchie.settings import get_daily_goal, get_session_size
from frenchie.streak import load_streak, record_goal_completion, save_streak, today_stamp

console = Console()

EXIT_WORDS = ("q", "menu")
RATINGS = {"r": "remembered", "f": "forgot", "v": "very familiar"}


class SessionExitRequested(Exception):
    """The learner asked to leave the current session."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def show_welcome():
    console.print(Panel(
        "[bold]Frenchie[/bold]\n[dim]French vocabulary, spaced out just right[/dim]",
        title="Bienvenue", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("learn", "Today's learning queue"),
        ("browse", "Walk the whole list in order"),
        ("review", "Words you keep forgetting"),
        ("familiar", "Words set aside as very familiar"),
        ("collections", "Words grouped by topic"),
        ("stats", "Mastery + streak"),
        ("import", "Study a custom vocabulary file"),
        ("reset", "Erase all progress"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<10}[/cyan] {desc}")


def show_card(item: VocabularyItem, title: str) -> None:
    console.print(Panel(f"[bold]{item.french}[/bold]", title=title, subtitle=item.level.value, border_style="cyan"))
    session_prompt("[dim]Press Enter to reveal[/dim]", default="", show_default=False)
    console.print(Panel(
        f"{item.english}\n\n[italic]{item.example_fr}[/italic]\n[dim]{item.example_en}[/dim]",
        border_style="green",
    ))


def apply_rating(
    store: KeyValueStore, progress: ProgressMap, item: VocabularyItem,
    catalog: list[VocabularyItem], rating: str,
) -> ProgressMap:
    if rating == "r":
        return mark_remembered(store, progress, item.id, catalog)
    if rating == "v":
        return mark_very_familiar(store, progress, item.id, catalog)
    return mark_forgot(store, progress, item.id, catalog)


def run_learning_session(
    store: KeyValueStore, catalog: list[VocabularyItem], progress: ProgressMap,
    queue: list[VocabularyItem], streak: StreakState, daily_goal: int,
) -> tuple[ProgressMap, StreakState]:
    """Drill the queue. Progress is saved after every card, even if the learner quits early."""
    successes = 0
    for i, item in enumerate(queue, 1):
        show_card(item, f"Card {i}/{len(queue)}")
        rating = session_prompt("(r)emembered, (f)orgot, (v)ery familiar", choices=list(RATINGS) + list(EXIT_WORDS))
        progress = apply_rating(store, progress, item, catalog, rating)
        if rating in ("r", "v"):
            successes += 1
            if successes == daily_goal:
                streak = record_goal_completion(streak, today_stamp())
                save_streak(store, streak)
                console.print(f"[green]Daily goal reached! Streak: {streak.current_streak} day(s)[/green]")
        console.print()
    return progress, streak


def cmd_learn(store, catalog, progress, streak):
    queue = build_learning_queue(progress, catalog, get_session_size(store))
    if not queue:
        console.print("[yellow]Nothing to learn right now. Come back later![/yellow]")
        return progress, streak
    console.print(f"\n[bold]Learning Session[/bold] ({len(queue)} cards)\n")
    return run_learning_session(store, catalog, progress, queue, streak, get_daily_goal(store))


def cmd_browse(store, catalog, progress):
    index = load_current_index(store) % len(catalog)
    while True:
        item = catalog[index]
        forgot = progress[item.id].forgot_count if item.id in progress else 0
        badge = f" [red]forgot {forgot}x[/red]" if forgot else ""
        show_card(item, f"{index + 1} / {len(catalog)}{badge}")
        rating = session_prompt("(r)emembered, (f)orgot", choices=["r", "f", *EXIT_WORDS])
        progress = apply_rating(store, progress, item, catalog, rating)
        index = (index + 1) % len(catalog)
        save_current_index(store, index)


def cmd_review(catalog, progress):
    entries = list_forgotten(progress, catalog)
    if not entries:
        console.print("[green]Nothing forgotten yet. Keep it up![/green]")
        return
    table = Table(title=f"Forgot ({len(entries)})")
    table.add_column("French", style="cyan")
    table.add_column("English")
    table.add_column("Forgot", justify="right")
    for entry in entries:
        table.add_row(entry.item.french, entry.item.english, f"[red]{entry.forgot_count}[/red]")
    console.print(table)


def cmd_familiar(store, catalog, progress):
    items = list_familiar(progress, catalog)
    if not items:
        console.print("[dim]No words marked as very familiar.[/dim]")
        return progress
    table = Table(title=f"Familiar ({len(items)})")
    table.add_column("#", justify="right")
    table.add_column("French", style="cyan")
    table.add_column("English")
    for i, item in enumerate(items, 1):
        table.add_row(str(i), item.french, item.english)
    console.print(table)
    choice = Prompt.ask("Restore which # (Enter to skip)", default="", show_default=False).strip()
    if choice.isdigit() and 1 <= int(choice) <= len(items):
        item = items[int(choice) - 1]
        progress = restore_from_familiar(store, progress, item.id, catalog)
        console.print(f"[green]{item.french} is back in rotation.[/green]")
    return progress


def cmd_collections(catalog):
    collections = list_collections(catalog)
    if not collections:
        console.print("[dim]No collections in this vocabulary list.[/dim]")
        return
    table = Table(title="Collections")
    table.add_column("#", justify="right")
    table.add_column("Collection", style="cyan")
    table.add_column("Words", justify="right")
    for i, entry in enumerate(collections, 1):
        table.add_row(str(i), entry.name, str(entry.count))
    console.print(table)
    choice = Prompt.ask("Open which # (Enter to skip)", default="", show_default=False).strip()
    if not (choice.isdigit() and 1 <= int(choice) <= len(collections)):
        return
    entry = collections[int(choice) - 1]
    words = Table(title=f"{entry.name} ({entry.count} word{'s' if entry.count != 1 else ''})")
    words.add_column("French", style="cyan")
    words.add_column("English")
    words.add_column("Level", justify="center")
    for item in items_in_collection(catalog, entry.collection):
        words.add_row(item.french, item.english, item.level.value)
    console.print(words)


def cmd_stats(catalog, progress, streak):
    stats = get_learning_stats(progress, catalog)
    color = get_mastery_color(stats.mastery_percentage)
    label = get_mastery_label(stats.mastery_percentage)
    bar_filled = stats.mastery_percentage // 5
    bar = f"[{color}]{'█' * bar_filled}{'░' * (20 - bar_filled)}[/{color}]"
    console.print(f"\n  Mastery: [bold]{stats.mastery_percentage}%[/bold] {bar} [{color}]{label}[/{color}]\n")
    table = Table(title="Progress")
    table.add_column("Total", justify="right")
    table.add_column("Learned", justify="right")
    table.add_column("Due", justify="right")
    table.add_column("New", justify="right")
    table.add_row(str(stats.total), str(stats.learned), str(stats.due), str(stats.new))
    console.print(table)
    console.print(f"\n  Streak: [bold]{streak.current_streak}[/bold] day(s)  |  "
                  f"Longest: [bold]{streak.longest_streak}[/bold]")


def cmd_import(catalog):
    file_path = Prompt.ask("File path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return catalog
    try:
        imported = import_file(file_path)
    except CatalogError as e:
        console.print(f"[red]Could not import: {e}[/red]")
        return catalog
    console.print(f"[green]Loaded {len(imported)} items from {Path(file_path).name}[/green]")
    return imported


def main():
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    store = KeyValueStore(DEFAULT_DB_PATH)
    catalog = load_catalog()
    progress = load_progress(store)
    streak = load_streak(store)

    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="learn").strip().lower()
        try:
            if choice == "learn":
                progress, streak = cmd_learn(store, catalog, progress, streak)
            elif choice == "browse":
                cmd_browse(store, catalog, progress)
            elif choice == "review":
                cmd_review(catalog, progress)
            elif choice == "familiar":
                progress = cmd_familiar(store, catalog, progress)
            elif choice == "collections":
                cmd_collections(catalog)
            elif choice == "stats":
                cmd_stats(catalog, progress, streak)
            elif choice == "import":
                catalog = cmd_import(catalog)
            elif choice == "reset":
                if Confirm.ask("Erase all progress?", default=False):
                    reset_progress(store)
                    progress, streak = {}, StreakState()
                    console.print("[yellow]Progress erased.[/yellow]")
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]À bientôt ![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except SessionExitRequested:
            # Mutations already saved; reload to pick up the latest working copy.
            progress = load_progress(store)
            streak = load_streak(store)
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
