#!/usr/bin/env python3
"""Accountability TUI: browse rounds and log today's progress, powered by Textual."""

from __future__ import annotations

import sys

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import DataTable, Footer, Header, Label, Static

from accountability import (
    AccountabilityError,
    configure_logging,
    describe_frequency,
    format_date_range,
    overall_completion,
    workspace_root,
)
from accountability import services


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
}

#main-layout {
    height: 1fr;
}

#left-pane {
    width: 2fr;
    min-width: 30;
    border-right: tall $primary-background-darken-2;
    padding: 0 1;
}

#right-pane {
    width: 3fr;
    min-width: 40;
    padding: 0 1;
}

.section-title {
    text-style: bold;
    color: $text;
    margin: 1 0 0 0;
    padding: 0 1;
}

#round-info {
    height: auto;
    padding: 1 2;
    margin: 0 0 1 0;
    border: tall $primary-background-darken-2;
}

#rounds-table, #goals-table {
    height: 1fr;
}
"""


# ── Main app ───────────────────────────────────────────────────


class AccountabilityApp(App):
    """Rounds on the left, the selected round's goals on the right."""

    TITLE = "Accountability"
    CSS = CSS
    AUTO_FOCUS = "#rounds-table"

    BINDINGS = [
        Binding("l", "log_today", "Log Today"),
        Binding("r", "refresh", "Refresh"),
        Binding("tab", "focus_next", "Switch Pane", show=False),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._round_ids: list[str] = []
        self._goal_ids: list[str] = []
        self._selected_round: str | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            Vertical(
                Label("Rounds", classes="section-title"),
                DataTable(id="rounds-table", cursor_type="row"),
                id="left-pane",
            ),
            Vertical(
                Label("Goals", classes="section-title"),
                Static(id="round-info"),
                DataTable(id="goals-table", cursor_type="row"),
                id="right-pane",
            ),
            id="main-layout",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#rounds-table", DataTable).add_columns("Dates", "Goals", "Reward", "Punishment")
        self.query_one("#goals-table", DataTable).add_columns(
            "Goal", "Schedule", "Done", "%", "Missed", "Today"
        )
        self._load_rounds()

    def _load_rounds(self) -> None:
        table = self.query_one("#rounds-table", DataTable)
        table.clear()
        rounds = sorted(services.get_all_rounds(), key=lambda r: r.start_date, reverse=True)
        self._round_ids = [r.id for r in rounds]
        for r in rounds:
            table.add_row(
                format_date_range(r.start_date, r.end_date),
                str(len(r.goals)),
                r.reward or "-",
                r.punishment or "-",
            )

        if self._selected_round not in self._round_ids:
            active = services.get_active_round()
            self._selected_round = active.id if active else (self._round_ids[0] if self._round_ids else None)
        if self._selected_round is not None:
            table.move_cursor(row=self._round_ids.index(self._selected_round))
        self._load_goals()

    def _load_goals(self) -> None:
        table = self.query_one("#goals-table", DataTable)
        info = self.query_one("#round-info", Static)
        table.clear()
        self._goal_ids = []

        if self._selected_round is None:
            info.update("(no rounds yet)")
            self.sub_title = ""
            return

        rnd = services.get_round(self._selected_round)
        summary = services.get_progress_summary(rnd.id)
        goals_by_id = {g.id: g for g in rnd.goals}

        info_parts = [
            format_date_range(rnd.start_date, rnd.end_date),
            f"Day {summary.days_elapsed} of {summary.total_days}, {summary.days_remaining} left",
        ]
        if rnd.reward:
            info_parts.append(f"Reward: {rnd.reward}")
        if rnd.punishment:
            info_parts.append(f"Punishment: {rnd.punishment}")
        info.update("\n".join(info_parts))
        self.sub_title = f"{overall_completion(summary)}% overall"

        for gs in summary.goal_summaries:
            goal = goals_by_id[gs.goal_id]
            self._goal_ids.append(gs.goal_id)
            table.add_row(
                f"{goal.emoji} {gs.goal_title}".strip(),
                describe_frequency(goal.frequency),
                f"{gs.completed_count}/{gs.expected_count}",
                f"{gs.completion_percentage:.0f}%",
                str(gs.failed_count),
                "ready" if gs.can_log_today else (gs.can_log_reason or ""),
            )

    @on(DataTable.RowHighlighted, "#rounds-table")
    def _on_round_highlighted(self, event: DataTable.RowHighlighted) -> None:
        if 0 <= event.cursor_row < len(self._round_ids):
            round_id = self._round_ids[event.cursor_row]
            if round_id != self._selected_round:
                self._selected_round = round_id
                self._load_goals()

    # ── Actions ────────────────────────────────────────────────

    def action_refresh(self) -> None:
        self._load_rounds()

    def action_log_today(self) -> None:
        table = self.query_one("#goals-table", DataTable)
        if self._selected_round is None or not self._goal_ids:
            self.notify("Select a round with goals first", severity="warning")
            return
        row = table.cursor_row
        if not 0 <= row < len(self._goal_ids):
            return
        self._do_log(self._selected_round, self._goal_ids[row])

    @work(thread=True)
    def _do_log(self, round_id: str, goal_id: str) -> None:
        """Log today's progress in a worker thread, then reload the goals."""
        try:
            rnd = services.get_round(round_id)
            goal = rnd.find_goal(goal_id)
            duration = goal.duration_seconds if goal else 0
            entry = services.log_progress(round_id, goal_id, duration)
            self.call_from_thread(self.notify,
                f"Logged {goal.title if goal else goal_id} for {entry.target_date}",
                title="Progress Logged", severity="information")
            self.call_from_thread(self._load_goals)
        except AccountabilityError as e:
            self.call_from_thread(self.notify,
                str(e), title="Cannot Log", severity="warning")

    def action_quit_app(self) -> None:
        self.exit()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = workspace_root()
    if not root.exists():
        print(f"Workspace not found: {root}")
        print("Set ACCOUNTABILITY_ROOT or create the directory first.")
        sys.exit(1)

    configure_logging(root=root)
    app = AccountabilityApp()
    app.run()


if __name__ == "__main__":
    main()
