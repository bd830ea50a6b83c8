# progress.py
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)


def get_progress(transient: bool = False):
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total} files"),
        TextColumn("[green]{task.fields[voters]} voters"),
        TimeElapsedColumn(),
        TimeRemainingColumn(),
        transient=transient,
    )
