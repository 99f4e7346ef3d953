"""
Issue history for equipment heads across line visits.
"""

from datetime import date, datetime

from models.heads import normalize_head

OFFLINE_STATUS = "offline"


def _visit_sort_key(visit_date) -> date:
    if isinstance(visit_date, datetime):
        return visit_date.date()
    if isinstance(visit_date, date):
        return visit_date
    try:
        return datetime.fromisoformat(str(visit_date)).date()
    except ValueError:
        return date.min


def build_head_issue_history(
    line_title: str,
    head_id: int,
    visits: list[dict],
    current_visit_id: str | None = None,
) -> list[dict]:
    """
    Build the issue history of one head across past visits.

    Visits where the head was offline or had issues are included; the current
    visit is skipped. Legacy single-error heads are normalized first.

    Returns:
        List of {date, visitName, visitId, issues} dicts, newest first
    """
    if not visits or not line_title or not head_id:
        return []

    history = []
    for visit in visits:
        if visit.get("id") == current_visit_id:
            continue

        line = next(
            (ln for ln in visit.get("lines") or [] if ln.get("title") == line_title), None
        )
        if line is None:
            continue

        raw_head = next((h for h in line.get("heads") or [] if h.get("id") == head_id), None)
        if raw_head is None:
            continue

        head = normalize_head(raw_head)
        if head.status != OFFLINE_STATUS and not head.issues:
            continue

        history.append(
            {
                "date": visit.get("date"),
                "visitName": visit.get("name") or "Unnamed Visit",
                "visitId": visit.get("id"),
                "issues": [issue.model_dump() for issue in head.issues],
            }
        )

    history.sort(key=lambda h: _visit_sort_key(h["date"]), reverse=True)
    return history
