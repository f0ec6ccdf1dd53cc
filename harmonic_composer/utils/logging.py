from rich.console import Console

# soft_wrap keeps long values (query strings, crossing lists) on one line
console = Console(highlight=False, soft_wrap=True)

def info(msg: str) -> None:
    console.print(f"[bold cyan]INFO[/bold cyan] {msg}")

def warn(msg: str) -> None:
    console.print(f"[bold yellow]WARN[/bold yellow] {msg}")

def error(msg: str) -> None:
    console.print(f"[bold red]ERROR[/bold red] {msg}")

def notice(field: str, value, fallback) -> None:
    """Parameter was reset to its default; same wording as the editor's alert."""
    warn(f"{field}={value!r} should be a positive number; using {fallback!r} instead.")
