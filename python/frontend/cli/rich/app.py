"""Rich terminal frontend — the element board, HUD and power-up bar.

Reads single keypresses with a short timeout and pumps the realtime
scheduler between them, so the countdown keeps running while the
player thinks.
"""

from __future__ import annotations

import random
from pathlib import Path

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from backend.engine.gameplay import GamePlay
from backend.engine.gamestate import GameState, Phase
from backend.engine.scheduler import RealtimeScheduler
from backend.engine.workshop import Workshop
from backend.models.config import Mode, for_mode
from backend.models.element import DefectKind, Element
from backend.models.highscore import HighScoreManager, JsonFileStore
from frontend.cli.input_handler import read_key_timeout

console = Console()

STORAGE_FILE = "storage.json"

# Editable fields: prompt name -> (ui field, parser)
_EDITABLE = {
    "text": ("text", str),
    "color": ("color", str),
    "slider": ("slider_value", float),
    "option": ("selected_option", str),
    "opacity": ("opacity", float),
    "scale": ("scale", float),
}

# What a plain click repairs, first broken kind wins.
_CLICK_PATCHES: list[tuple[DefectKind, dict[str, bool]]] = [
    (DefectKind.CLICK, {"clicked": True}),
    (DefectKind.BLUR, {"blurred": False}),
    (DefectKind.DISABLED, {"disabled": False}),
    (DefectKind.CHECKBOX, {"checked": True}),
    (DefectKind.TOGGLE, {"toggle_state": True}),
]


# -- helpers ------------------------------------------------------------------


def _format_time(seconds: int) -> str:
    m, s = divmod(int(seconds), 60)
    return f"{m:02d}:{s:02d}"


def _display_order(state: GameState) -> list[Element]:
    return sorted(state.elements, key=lambda el: el.ui.order_index)


def _describe_defects(el: Element) -> str:
    parts: list[str] = []
    for kind in el.defects:
        target = el.target(kind)
        if kind is DefectKind.ROTATE:
            parts.append(f"rotate→{target}°")
        elif kind is DefectKind.ORDER:
            parts.append(f"slot {target + 1}")
        elif kind in (DefectKind.TEXT, DefectKind.COLOR, DefectKind.SLIDER, DefectKind.DROPDOWN):
            parts.append(f"{kind.value}={target}")
        else:
            parts.append(kind.value)
    return ", ".join(parts)


def _describe_ui(el: Element) -> str:
    ui = el.ui
    return (
        f"{ui.rotation:g}° · '{ui.text}' · {ui.color} · slider {ui.slider_value:g}"
        f" · α{ui.opacity:g} · ×{ui.scale:g}"
    )


# -- rendering ----------------------------------------------------------------


def _render_elements(state: GameState, selected: int) -> Table:
    table = Table(box=rich.box.ROUNDED, border_style="bright_blue", expand=False)
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Widget", style="bold")
    table.add_column("Broken", style="yellow")
    table.add_column("Now", style="dim")

    for i, el in enumerate(_display_order(state)):
        marker = "▶" if i == selected else " "
        if el.fixed:
            broken = "[bold green]✓ fixed[/bold green]"
        else:
            broken = _describe_defects(el)
        table.add_row(
            f"{marker}{i + 1}",
            f"{el.type.value} [dim]({el.id})[/dim]",
            broken,
            _describe_ui(el),
            style="on #313244" if i == selected else None,
        )
    return table


def _render_hud(state: GameState) -> Text:
    hud = Text()
    hud.append("  Level ", style="dim")
    hud.append(str(state.level), style="bold cyan")
    hud.append("   Score ", style="dim")
    hud.append(str(state.score), style="bold yellow")
    hud.append("   Best ", style="dim")
    hud.append(str(state.best_score), style="yellow")
    hud.append("   Time ", style="dim")
    hud.append(_format_time(state.time_left), style="bold red" if state.time_left <= 10 else "bold yellow")
    if state.combo > 1:
        hud.append(f"   Combo x{state.combo}", style="bold magenta")
    return hud


def _render_power_ups(state: GameState) -> Text:
    bar = Text()
    for i, p in enumerate(state.power_ups, 1):
        style = "bold green" if p.active else ("cyan" if state.score >= p.cost else "dim")
        bar.append(f"  {i}", style="bold")
        bar.append(f" {p.name} ({p.cost})", style=style)
    return bar


def _render_controls(state: GameState) -> Text:
    controls = Text()
    if state.running:
        keys = [("↑↓", "select"), ("C", "click"), ("R", "rotate"), ("E", "edit"),
                ("M", "move down"), ("N", "hint"), ("P", "pause"), ("Q", "quit")]
    else:
        keys = [("Enter", "play"), ("Q", "quit")]
    for key, label in keys:
        controls.append(f"  {key}", style="bold cyan")
        controls.append(f" {label} ", style="dim")
    return controls


def _draw(state: GameState, selected: int, notices: list[str]) -> None:
    console.clear()
    title = {
        Phase.RUNNING: "[bold cyan]Fix The Interface[/bold cyan]",
        Phase.LEVEL_COMPLETE: "[bold green]Level cleared![/bold green]",
        Phase.TIME_EXPIRED: "[bold red]Time is up[/bold red]",
        Phase.IDLE: "[bold]Fix The Interface[/bold]",
    }[state.phase]

    parts: list = [Align.center(_render_hud(state))]
    if state.elements:
        parts.append(Align.center(_render_elements(state, selected)))
    if state.power_ups:
        parts.append(Align.center(_render_power_ups(state)))

    console.print()
    console.print(Align.center(Panel(Group(*parts), title=title, border_style="bright_blue", padding=(1, 2))))
    if state.message:
        console.print(Align.center(Text(state.message, style="bold")))
    for notice in notices[-3:]:
        console.print(Align.center(Text(f"★ Achievement unlocked: {notice} ★", style="bold yellow")))
    console.print(Align.center(_render_controls(state)))


# -- actions ------------------------------------------------------------------


def _click(game: GamePlay, el: Element) -> None:
    for kind, patch in _CLICK_PATCHES:
        if el.is_broken(kind):
            game.fix_attempt(el.id, patch)
            return
    game.fix_attempt(el.id, clicked=True)


def _edit(game: GamePlay, el: Element) -> None:
    raw = console.input(f"  [cyan]{el.id}[/cyan] field=value ({', '.join(_EDITABLE)}): ").strip()
    name, _, value = raw.partition("=")
    field = _EDITABLE.get(name.strip().lower())
    if field is None or not value:
        return
    ui_field, parse = field
    try:
        game.fix_attempt(el.id, {ui_field: parse(value.strip())})
    except ValueError:
        console.print(f"  [red]Not a valid {name}: {value}[/red]")


def _move_down(game: GamePlay, state: GameState, selected: int) -> int:
    ordered = _display_order(state)
    if selected + 1 >= len(ordered):
        return selected
    game.swap_order(ordered[selected].id, ordered[selected + 1].id)
    return selected + 1


# -- game loop ----------------------------------------------------------------


def _play(game: GamePlay, scheduler: RealtimeScheduler, level: int) -> None:
    notices: list[str] = []

    def collect(state: GameState) -> None:
        names = {a.id: a.name for a in state.achievements}
        notices.extend(names[i] for i in state.unlocked_now)

    unsubscribe = game.subscribe(collect)
    game.start_level(level)
    selected = 0
    try:
        while True:
            state = game.state
            selected = max(0, min(selected, len(state.elements) - 1))
            _draw(state, selected, notices)

            key = None
            while key is None:
                key = read_key_timeout(0.5)
                scheduler.pump()
                if key is None and game.state is not state:
                    break
            if key is None:
                continue

            if key == "quit":
                game.stop()
                return
            if not game.state.running:
                if key in ("enter", "pause"):
                    notices.clear()
                    game.start_level()
                continue

            ordered = _display_order(game.state)
            el = ordered[selected]
            if key == "up":
                selected = max(0, selected - 1)
            elif key == "down":
                selected = min(len(ordered) - 1, selected + 1)
            elif key == "click":
                _click(game, el)
            elif key == "rotate":
                game.fix_attempt(el.id, rotation=(el.ui.rotation + 90) % 360)
            elif key == "edit":
                _edit(game, el)
            elif key == "move":
                selected = _move_down(game, game.state, selected)
            elif key == "hint":
                game.use_hint(el.id)
            elif key == "pause":
                game.stop()
            elif key in ("1", "2", "3"):
                power_ups = game.state.power_ups
                index = int(key) - 1
                if index < len(power_ups):
                    game.use_power_up(power_ups[index].id)
    finally:
        unsubscribe()


# -- info screens -------------------------------------------------------------


def show_stats(manager: HighScoreManager) -> None:
    stats = manager.get_stats()
    table = Table(title="Fix The Interface", box=rich.box.ROUNDED, border_style="dim")
    table.add_column("Stat", style="dim")
    table.add_column("Value", justify="right", style="yellow")
    table.add_row("Best score", str(manager.get_best()))
    table.add_row("Levels played", str(stats.games_played))
    table.add_row("Elements fixed", str(stats.total_fixed))
    table.add_row("Best combo", str(stats.max_combo))
    console.print()
    console.print(Align.center(table))
    console.print()


def show_workshop(level: int, seed: int | None = None) -> None:
    """Print the defects of a generated workshop level."""
    shop = Workshop(rng=random.Random(seed), auto_advance_ms=None)
    shop.start_level(level)
    state = shop.state

    table = Table(
        title=f"Workshop level {state.level}: {state.level_name}",
        title_style="bold cyan",
        box=rich.box.ROUNDED,
        border_style="dim",
    )
    table.add_column("Defect", style="dim")
    table.add_column("Type", style="bold")
    table.add_column("Tool", style="cyan")
    table.add_column("Position", justify="right")
    for d in state.defects:
        table.add_row(d.id, d.type.value, str(shop.tool_for(d.id)), f"{d.x:.0f}, {d.y:.0f}")
    console.print()
    console.print(Align.center(table))
    console.print()


# -- public entry point -------------------------------------------------------


def run(mode: Mode, data_dir: Path, level: int = 1, seed: int | None = None) -> None:
    """Launch the Rich frontend."""
    scheduler = RealtimeScheduler()
    manager = HighScoreManager(JsonFileStore(data_dir / STORAGE_FILE))
    game = GamePlay(
        for_mode(mode),
        rng=random.Random(seed),
        scheduler=scheduler,
        scores=manager,
    )
    _play(game, scheduler, level)
    console.clear()
    console.print(Align.center(Text(f"\nFinal score: {game.state.score}\n", style="bold cyan")))
