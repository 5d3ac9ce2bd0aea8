from fncli import cli

from .achievements import ACHIEVEMENTS, total_points, unlocked_achievements
from .lib.render import render_dashboard, render_stats
from .session import open_store
from .store import select_profile_stats

__all__ = ["dashboard"]


def dashboard() -> None:
    print(render_dashboard(open_store()))


@cli("ritual")
def today() -> None:
    """Today's habits and progress"""
    dashboard()


@cli("ritual")
def stats() -> None:
    """Totals, best streak and achievement points"""
    store = open_store()
    unlocked = unlocked_achievements(store.habits, store.completions)
    print(
        render_stats(
            select_profile_stats(store),
            points=total_points(store.habits, store.completions),
            unlocked=len(unlocked),
            total=len(ACHIEVEMENTS),
        )
    )
