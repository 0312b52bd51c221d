"""Interactive CLI application."""
import logging
from datetime import datetime, timezone

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt, Confirm
from rich.table import Table

from lifeos.assistant import Assistant
from lifeos.config import load_config
from lifeos.dashboard import countdown, days_until, get_summary, greeting
from lifeos.models import (
    CATEGORIES, DIFFICULTIES, TASK_STATUSES, THEMES, DueState, Outcome, ValidationError,
)
from lifeos.session import Session

console = Console()

FILTERS = ["due", "all", "mastered"]
STATE_COLORS = {DueState.DUE: "yellow", DueState.NOT_DUE: "cyan", DueState.MASTERED: "green"}
STATUS_COLORS = {"Todo": "white", "In Progress": "cyan", "Blocked": "red", "Completed": "green"}


class SessionExitRequested(Exception):
    """Raised when the user asks to leave a screen and return to the menu."""


def session_prompt(message: str, **kwargs) -> str:
    answer = Prompt.ask(message, **kwargs)
    if answer is not None and answer.strip().lower() in ("q", "menu"):
        raise SessionExitRequested()
    return answer


def session_int_prompt(message: str, choices: list) -> int:
    return int(session_prompt(message, choices=choices))


def show_welcome(session: Session):
    now = datetime.now(timezone.utc)
    console.print(Panel(
        f"[bold]{greeting(now, session.config.zone)}, {session.settings.name}[/bold]\n[dim]Life OS[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("dashboard", "Countdown + progress"),
        ("tasks", "Daily checklist"),
        ("problems", "DSA problem reviews"),
        ("topics", "Topic reviews"),
        ("settings", "Name, target date, theme"),
        ("reset", "Factory reset"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def show_errors(error: ValidationError):
    for field_name, message in error.errors.items():
        console.print(f"[red]{field_name}: {message}[/red]")


def render_items(session: Session, items: list, title: str) -> None:
    now = datetime.now(timezone.utc)
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Title", style="bold")
    table.add_column("Tags")
    table.add_column("Stage", justify="right")
    table.add_column("Next Review")
    table.add_column("State")
    for i, item in enumerate(items, 1):
        state = session.classify(item, now)
        color = STATE_COLORS[state]
        label = item.area or item.difficulty or ""
        tags = ", ".join(item.tags)
        table.add_row(
            str(i),
            item.title + (f" [dim]({label})[/dim]" if label else ""),
            tags,
            f"{item.stage}/5",
            f"{item.next_review.strftime('%b %d')} ({days_until(item.next_review, now, session.config.zone)}d)",
            f"[{color}]{state.value}[/{color}]",
        )
    console.print(table)


def pick_item(items: list):
    if not items:
        console.print("[yellow]Nothing to pick.[/yellow]")
        return None
    index = session_int_prompt("Item #", choices=[str(i) for i in range(1, len(items) + 1)])
    return items[index - 1]


def visible_items(session: Session, store, mode: str) -> list:
    if mode == "due":
        return list(store.due(datetime.now(timezone.utc), session.config.zone))
    if mode == "mastered":
        return list(store.mastered())
    return list(store)


def split_tags(raw: str) -> list:
    return [t for t in raw.split(",") if t.strip()]


def cmd_dashboard(session: Session, assistant: Assistant):
    now = datetime.now(timezone.utc)
    left = countdown(session.settings.target_date, now, session.config.zone)
    summary = get_summary(session, now)
    console.print(Panel(
        f"[bold]{left['days']}d {left['hours']}h {left['minutes']}m {left['seconds']}s[/bold]"
        f" until {session.settings.target_date}",
        title="Countdown", border_style="blue",
    ))
    console.print(f"\n  [italic]{assistant.motivational_quote()}[/italic]\n")
    console.print(f"  Tasks: [bold]{summary['tasks_completed']}/{summary['tasks_total']}[/bold] done  |  "
                  f"Problems due: [bold]{summary['problems_due']}[/bold]  |  "
                  f"Mastered: [bold]{summary['problems_mastered']}[/bold]  |  "
                  f"Topics due: [bold]{summary['topics_due']}[/bold]")
    recent = list(session.problems)[-3:]
    if recent:
        render_items(session, recent, "Recent Problems")


def cmd_tasks(session: Session, assistant: Assistant):
    while True:
        table = Table(title="Daily Checklist")
        table.add_column("#", justify="right")
        table.add_column("Task")
        table.add_column("Category")
        table.add_column("Status")
        ordered = session.tasks.ordered()
        for i, task in enumerate(ordered, 1):
            color = STATUS_COLORS[task.status]
            table.add_row(str(i), task.title, task.category, f"[{color}]{task.status}[/{color}]")
        console.print(table)
        action = session_prompt(
            "Action", choices=["add", "toggle", "status", "split", "delete", "clear", "menu"], default="menu",
        )
        if action == "add":
            title = session_prompt("Title")
            category = session_prompt("Category", choices=list(CATEGORIES), default="Personal")
            try:
                session.add_task(title, category)
            except ValidationError as e:
                show_errors(e)
        elif action == "toggle":
            task = pick_item(ordered)
            if task:
                session.toggle_task(task.id)
        elif action == "status":
            task = pick_item(ordered)
            if task:
                status = session_prompt("Status", choices=list(TASK_STATUSES), default=task.status)
                session.set_task_status(task.id, status)
        elif action == "split":
            task = pick_item(ordered)
            if task:
                for step in assistant.breakdown_task(task.title):
                    session.add_task(step, task.category)
        elif action == "delete":
            task = pick_item(ordered)
            if task:
                session.remove_task(task.id)
        elif action == "clear":
            if Confirm.ask("Remove every task?", default=False):
                session.clear_tasks()


def add_problem(session: Session):
    title = session_prompt("Problem name")
    link = session_prompt("Link")
    tags = split_tags(session_prompt("Topics (comma separated)", default=""))
    difficulty = session_prompt("Difficulty", choices=list(DIFFICULTIES))
    stage = session_int_prompt("Initial stage", choices=["1", "2", "3", "4", "5"])
    notes = session_prompt("Notes", default="")
    session.add_problem(title, link, tags, difficulty, stage=stage, notes=notes)
    console.print("[green]Problem added successfully![/green]")


def add_topic(session: Session):
    title = session_prompt("Topic name")
    known = session.topics.areas()
    if known:
        console.print(f"[dim]Existing areas: {', '.join(known)}[/dim]")
    area = session_prompt("Area", default="")
    tags = split_tags(session_prompt("Tags (comma separated)", default=""))
    stage = session_int_prompt("Initial stage", choices=["1", "2", "3", "4", "5"])
    notes = session_prompt("Notes", default="")
    session.add_topic(title, area=area, tags=tags, stage=stage, notes=notes)
    console.print("[green]Topic added successfully![/green]")


def run_review_screen(session: Session, assistant: Assistant, kind: str):
    store = session.problems if kind == "problem" else session.topics
    review = session.review_problem if kind == "problem" else session.review_topic
    remove = session.remove_problem if kind == "problem" else session.remove_topic
    mode = "due"
    while True:
        items = visible_items(session, store, mode)
        if items:
            render_items(session, items, f"{kind.title()}s ({mode})")
        else:
            console.print(f"[green]No {kind}s in '{mode}'.[/green]")
        actions = ["add", "pass", "fail", "filter", "delete", "menu"]
        if kind == "problem":
            actions.insert(3, "hint")
        action = session_prompt("Action", choices=actions, default="menu")
        if action == "add":
            try:
                (add_problem if kind == "problem" else add_topic)(session)
            except ValidationError as e:
                show_errors(e)
        elif action in ("pass", "fail"):
            item = pick_item(items)
            if item:
                updated = review(item.id, Outcome.SUCCESS if action == "pass" else Outcome.FAILURE)
                console.print(f"[cyan]{updated.title}: stage {updated.stage}, {updated.status}[/cyan]")
        elif action == "hint":
            item = pick_item(items)
            if item:
                console.print(Panel(assistant.hint(item.title, item.tags), title="Hint", border_style="magenta"))
        elif action == "filter":
            mode = session_prompt("Show", choices=FILTERS, default=mode)
        elif action == "delete":
            item = pick_item(items)
            if item:
                remove(item.id)


def cmd_settings(session: Session):
    name = session_prompt("Display name", default=session.settings.name)
    target = session_prompt("Target date (YYYY-MM-DD)", default=session.settings.target_date)
    theme = session_prompt("Theme", choices=list(THEMES), default=session.settings.theme)
    try:
        datetime.strptime(target, "%Y-%m-%d")
    except ValueError:
        console.print(f"[red]Invalid date: {target}[/red]")
        return
    session.update_settings(name=name, target_date=target, theme=theme)
    console.print("[green]Settings saved.[/green]")


def cmd_reset(session: Session):
    if Confirm.ask("Erase everything and restore the defaults?", default=False):
        session.reset()
        console.print("[yellow]State reset.[/yellow]")


def main():
    logging.basicConfig(
        level=logging.WARNING, format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    config = load_config()
    session = Session.open(config)
    assistant = Assistant(config.api_key, config.ai_model)

    show_welcome(session)

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="dashboard").strip().lower()
        try:
            if choice == "dashboard":
                cmd_dashboard(session, assistant)
            elif choice == "tasks":
                cmd_tasks(session, assistant)
            elif choice == "problems":
                run_review_screen(session, assistant, "problem")
            elif choice == "topics":
                run_review_screen(session, assistant, "topic")
            elif choice == "settings":
                cmd_settings(session)
            elif choice == "reset":
                cmd_reset(session)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]See you tomorrow![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except SessionExitRequested:
            continue
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
