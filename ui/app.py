from __future__ import annotations

import os
import secrets
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, status
from fastapi.responses import HTMLResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from accountability import (
    AccountabilityError,
    EntityNotFound,
    configure_logging,
    describe_frequency,
    format_date_range,
    get_clock,
    overall_completion,
    workspace_root as _workspace_root,
)
from accountability import services


# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, EntityNotFound):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


# ── Auth ──────────────────────────────────────────────────────

app = FastAPI(title="Accountability Rounds", version="0.1.0")
configure_logging()

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("ACCOUNTABILITY_USERNAME", "")
    expected_password = os.environ.get("ACCOUNTABILITY_PASSWORD", "")

    if not expected_username or not expected_password:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(username: str = Depends(get_current_user)) -> HTMLResponse:
    """Read-only overview of the active rounds."""
    root = _workspace_root()
    clock = get_clock(root)
    sections = []
    for rnd in services.get_active_rounds(root=root, clock=clock):
        summary = services.get_progress_summary(rnd.id, root=root, clock=clock)
        goals_by_id = {g.id: g for g in rnd.goals}
        rows = []
        for gs in summary.goal_summaries:
            goal = goals_by_id[gs.goal_id]
            state = "ready" if gs.can_log_today else _escape(gs.can_log_reason or "")
            rows.append(
                f"<tr><td>{_escape(goal.emoji)} {_escape(gs.goal_title)}</td>"
                f"<td>{_escape(describe_frequency(goal.frequency))}</td>"
                f"<td>{gs.completed_count}/{gs.expected_count}</td>"
                f"<td>{gs.completion_percentage:.0f}%</td>"
                f"<td>{gs.failed_count}</td>"
                f"<td>{state}</td></tr>"
            )
        sections.append(
            f"""
    <section class="card">
      <h2>{_escape(format_date_range(rnd.start_date, rnd.end_date))}</h2>
      <div class="muted small">Day {summary.days_elapsed} of {summary.total_days}
        &middot; {summary.days_remaining} left &middot; {overall_completion(summary)}% overall</div>
      <table>
        <tr><th>Goal</th><th>Schedule</th><th>Done</th><th>%</th><th>Missed</th><th>Today</th></tr>
        {''.join(rows)}
      </table>
    </section>"""
        )

    body = "".join(sections) if sections else '<p class="muted">(no active rounds)</p>'
    html = f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>Accountability Rounds</title>
</head>
<body>
  <div class="container">
    <header class="top">
      <h1>Accountability Rounds</h1>
      <div class="pill"><code>{_escape(str(root))}</code></div>
    </header>
    {body}
  </div>
</body>
</html>
"""
    return HTMLResponse(html)


# ── Rounds ────────────────────────────────────────────────────

@app.get("/api/rounds")
def api_list_rounds(username: str = Depends(get_current_user)) -> dict[str, Any]:
    rounds = services.get_all_rounds(root=_workspace_root())
    return {"rounds": [r.to_dict() for r in rounds]}


@app.get("/api/rounds/active")
def api_active_rounds(username: str = Depends(get_current_user)) -> dict[str, Any]:
    rounds = services.get_active_rounds(root=_workspace_root())
    return {"rounds": [r.to_dict() for r in rounds]}


@app.post("/api/rounds")
def api_create_round(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        created = services.create_round(payload, root=_workspace_root())
    except (AccountabilityError, ValueError) as e:
        raise _http_error(e) from e
    return {"ok": True, "round": created.to_dict()}


@app.get("/api/rounds/{round_id}")
def api_get_round(round_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        found = services.get_round(round_id, root=_workspace_root())
    except AccountabilityError as e:
        raise _http_error(e) from e
    return {"round": found.to_dict()}


@app.put("/api/rounds/{round_id}")
def api_update_round(round_id: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        updated = services.update_round(round_id, payload, root=_workspace_root())
    except (AccountabilityError, ValueError) as e:
        raise _http_error(e) from e
    return {"ok": True, "round": updated.to_dict()}


@app.delete("/api/rounds/{round_id}")
def api_delete_round(round_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        services.delete_round(round_id, root=_workspace_root())
    except AccountabilityError as e:
        raise _http_error(e) from e
    return {"ok": True, "round_id": round_id}


@app.get("/api/rounds/{round_id}/summary")
def api_round_summary(round_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        summary = services.get_progress_summary(round_id, root=_workspace_root())
    except AccountabilityError as e:
        raise _http_error(e) from e
    data = summary.to_dict()
    data["overallCompletion"] = overall_completion(summary)
    return data


@app.get("/api/rounds/{round_id}/progress")
def api_round_progress(round_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    entries = services.get_progress_for_round(round_id, root=_workspace_root())
    return {"progress": [p.to_dict() for p in entries]}


# ── Goals ─────────────────────────────────────────────────────

@app.post("/api/rounds/{round_id}/goals")
def api_add_goal(round_id: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        updated = services.add_goal(round_id, payload, root=_workspace_root())
    except (AccountabilityError, ValueError) as e:
        raise _http_error(e) from e
    return {"ok": True, "round": updated.to_dict()}


@app.put("/api/rounds/{round_id}/goals/{goal_id}")
def api_update_goal(
    round_id: str,
    goal_id: str,
    payload: dict[str, Any] = Body(...),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    try:
        updated = services.update_goal(round_id, goal_id, payload, root=_workspace_root())
    except (AccountabilityError, ValueError) as e:
        raise _http_error(e) from e
    return {"ok": True, "round": updated.to_dict()}


@app.delete("/api/rounds/{round_id}/goals/{goal_id}")
def api_remove_goal(round_id: str, goal_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        updated = services.remove_goal(round_id, goal_id, root=_workspace_root())
    except AccountabilityError as e:
        raise _http_error(e) from e
    return {"ok": True, "round": updated.to_dict()}


@app.get("/api/rounds/{round_id}/goals/{goal_id}/status")
def api_goal_status(round_id: str, goal_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        result = services.get_goal_status(round_id, goal_id, root=_workspace_root())
    except AccountabilityError as e:
        raise _http_error(e) from e
    return result.to_dict()


@app.get("/api/rounds/{round_id}/goals/{goal_id}/days")
def api_goal_days(
    round_id: str,
    goal_id: str,
    start: str | None = None,
    end: str | None = None,
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    """Per-date statuses; defaults to the whole round."""
    try:
        days = services.get_day_statuses(round_id, goal_id, start=start, end=end, root=_workspace_root())
    except (AccountabilityError, ValueError) as e:
        raise _http_error(e) from e
    return {"days": [d.to_dict() for d in days]}


# ── Progress ──────────────────────────────────────────────────

@app.post("/api/progress")
def api_log_progress(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    round_id = payload.get("roundId")
    goal_id = payload.get("goalId")
    if not round_id or not goal_id:
        raise HTTPException(status_code=400, detail="Missing roundId or goalId")
    try:
        entry = services.log_progress(
            str(round_id),
            str(goal_id),
            payload.get("durationSeconds", 0),
            notes=payload.get("notes"),
            target_date=payload.get("targetDate"),
            root=_workspace_root(),
        )
    except (AccountabilityError, ValueError) as e:
        raise _http_error(e) from e
    return {"ok": True, "progress": entry.to_dict()}


@app.delete("/api/progress/{progress_id}")
def api_delete_progress(progress_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        services.delete_progress(progress_id, root=_workspace_root())
    except AccountabilityError as e:
        raise _http_error(e) from e
    return {"ok": True, "progress_id": progress_id}
