from dataclasses import dataclass

from rich.console import Console
from rich.style import Style
from rich.table import Table

from ..spec import SpecSplitResult


@dataclass(frozen=True, slots=True)
class SpecCliTheme:
    title: str = "#7C3AED"
    section: str = "#00FFFF"
    path: str = "#4ADE80"


class CliHeadings:
    """Rule headings and the summary table printed after a split."""

    def __init__(self, console: Console | None = None, theme: SpecCliTheme | None = None):
        self.console = console if console is not None else Console()
        self.theme = theme if theme is not None else SpecCliTheme()

    def _rule(self, text: str, *, color: str, char: str, bold: bool) -> None:
        self.console.rule(text, style=Style(color=color, bold=bold), characters=char)

    def h1(self, text: str) -> None:
        self._rule(f"[bold]{text}[/bold]", color=self.theme.title, char="=", bold=True)

    def h2(self, text: str) -> None:
        self._rule(text, color=self.theme.section, char="─", bold=False)

    def render_split_result(self, result: SpecSplitResult) -> None:
        self.h1("sheetsplit")
        self.console.print(
            f"Source rows: [bold]{result.total_rows}[/bold] "
            f"(header [bold]{result.header_rows}[/bold]), "
            f"files written: [bold]{len(result.chunks)}[/bold]"
        )
        self.h2("Output files")

        table = Table(header_style=Style(color=self.theme.section, bold=True))
        for c_col in ("Part", "Rows", "Data rows", "Merges"):
            table.add_column(c_col, justify="right")
        table.add_column("File", style=Style(color=self.theme.path))
        for _chunk in result.chunks:
            table.add_row(
                *(
                    str(_v)
                    for _v in (
                        _chunk.index,
                        _chunk.total_rows,
                        _chunk.data_rows,
                        _chunk.merges,
                        _chunk.file_path,
                    )
                )
            )
        self.console.print(table)
