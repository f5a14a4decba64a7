# Interactive client for the resolver API
import requests
import os
import uuid
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.text import Text

from utils.lexicon import AVAILABLE_TRANSLATIONS

BASE_URL = os.getenv("RESOLVER_API_URL", "http://localhost:8000/api/scripture")
console = Console()

STATUS_STYLES = {
    "FAMOUS_PHRASE_HIT": ("Famous Phrase", "bold green"),
    "STRUCTURED_REFERENCE": ("Reference", "bold green"),
    "TOPIC_HIT": ("Topic", "bold cyan"),
    "AI_HIT": ("AI Answer", "bold magenta"),
    "KEYWORD_HIT": ("Keyword Search", "bold yellow"),
    "SEMANTIC_HIT": ("Semantic Search", "bold yellow"),
    "NO_MATCH": ("No Match", "bold red"),
    "MEDIA": ("Media Command", "bold blue"),
    "IGNORED": ("Ignored", "dim"),
}


def resolve_query(query: str, translation: str = "kjv", spoken: bool = False, session_id: str = None):
    payload = {"query": query, "translation": translation, "spoken": spoken}
    if session_id:
        payload["session_id"] = session_id
    try:
        response = requests.post(f"{BASE_URL}/resolve", json=payload, timeout=60)
        response.raise_for_status()
        return response.json()
    except requests.RequestException as e:
        console.print(f"[red]Request failed:[/red] {e}")
        return None


def render_results(response: dict, out: Console = None):
    out = out or console
    status = response.get("status", "NO_MATCH")
    title, style = STATUS_STYLES.get(status, (status.title(), "bold"))

    out.print(f"[{style}]Match Type: {title}[/{style}]")

    line = Text()
    line.append("Query: ", style="blue")
    line.append(response.get("query", ""))
    confidence = response.get("confidence") or 0
    if confidence > 0:
        line.append(f" (confidence: {confidence:.0%})", style="dim")
    out.print(line)

    translation = (response.get("translation") or "").upper()
    if translation:
        out.print(f"[cyan]Translation: {translation}[/cyan]")

    reference = response.get("formatted_reference")
    if reference:
        out.print(Panel.fit(f"[bold]{reference}[/bold]", border_style="green"))

    label = response.get("label")
    if label and label != reference:
        out.print(f"[dim]{label}[/dim]")

    answer = response.get("answer")
    if answer:
        out.rule("[bold blue]AI Response")
        out.print(Panel.fit(answer, border_style="cyan"))

    topic_verses = response.get("topic_verses") or []
    if topic_verses:
        table = Table(title=f"{response.get('topic', 'Topic')} verses", show_lines=True, expand=True)
        table.add_column("Reference", style="cyan", min_width=12)
        table.add_column("Snippet", style="white", ratio=3, overflow="fold")
        for verse in topic_verses:
            table.add_row(verse["reference"], verse["snippet"])
        out.print(table)

    matches = response.get("keyword_matches") or []
    if matches:
        table = Table(title="Matching verses", show_lines=True, expand=True)
        table.add_column("Reference", style="cyan", min_width=12)
        table.add_column("Text", style="white", ratio=3, overflow="fold")
        for verse in matches[:10]:
            table.add_row(verse["reference"], verse["text"])
        out.print(table)
        if len(matches) > 10:
            out.print(f"[dim]Total: {len(matches)} verses[/dim]")

    semantic = response.get("semantic_matches") or []
    if semantic:
        table = Table(title="Similar verses", show_lines=True, expand=True)
        table.add_column("Reference", style="cyan", min_width=12)
        table.add_column("Score", style="green", no_wrap=True)
        table.add_column("Text", style="white", ratio=3, overflow="fold")
        for verse in semantic:
            table.add_row(verse["reference"], f"{verse['score']:.0%}", verse["text"])
        out.print(table)

    message = response.get("message")
    if message:
        out.print(f"[yellow]{message}[/yellow]")


def show_help():
    """Show help information"""
    help_text = """
[bold blue]Voice Bible Resolver Help[/bold blue]

[bold yellow]Things to try:[/bold yellow]
• [green]References[/green]: John 3:16, romans eight twenty eight, first john three sixteen
• [green]Famous phrases[/green]: the lord is my shepherd, jesus wept
• [green]Topics[/green]: verses about love, what does the bible say about fear
• [green]Translations[/green]: john 3:16 in the world english bible

[bold yellow]Commands:[/bold yellow]
• [cyan]help[/cyan] - Show this help
• [cyan]translation <id>[/cyan] - Change translation
• [cyan]spoken[/cyan] - Toggle the spoken-input intent gate
• [cyan]exit/quit[/cyan] - Exit the program
"""
    console.print(Panel(help_text, border_style="blue"))


def run_cli():
    console.print("[bold magenta]Voice Bible Resolver[/bold magenta]")
    console.print("[dim]Type 'help' for examples, 'exit' to quit[/dim]\n")

    current_translation = "kjv"
    spoken = False
    session_id = uuid.uuid4().hex
    console.print(f"[bold cyan]Current translation:[/bold cyan] [green]{current_translation.upper()}[/green]")

    while True:
        try:
            query = console.input("[bold yellow]Say something[/bold yellow]: ").strip()

            if query.lower() in ["exit", "quit", "q"]:
                console.print("\nGoodbye!")
                break
            elif query.lower() in ["help", "h", "?"]:
                show_help()
                continue
            elif query.lower() == "spoken":
                spoken = not spoken
                console.print(f"[cyan]Spoken mode {'on' if spoken else 'off'}[/cyan]\n")
                continue
            elif query.lower().startswith("translation "):
                new_translation = query[len("translation "):].strip().lower()
                if new_translation in AVAILABLE_TRANSLATIONS:
                    current_translation = new_translation
                    console.print(f"[bold green]Translation changed to:[/bold green] [cyan]{AVAILABLE_TRANSLATIONS[new_translation]}[/cyan]")
                else:
                    console.print(f"[red]Unsupported translation:[/red] {new_translation}")
                    console.print(f"[dim]Available: {', '.join(AVAILABLE_TRANSLATIONS)}[/dim]")
                console.print()
                continue
            elif not query:
                continue

            with console.status("[bold green]Resolving..."):
                response = resolve_query(query, current_translation, spoken, session_id)

            if response:
                console.print()
                render_results(response)
                # follow the translation the user asked for out loud
                if response.get("translation_id") in AVAILABLE_TRANSLATIONS:
                    current_translation = response["translation_id"]
                console.print()
            else:
                console.print("[red]Failed to get response from API[/red]\n")

        except KeyboardInterrupt:
            console.print("\n\nExiting...")
            break


if __name__ == "__main__":
    run_cli()
