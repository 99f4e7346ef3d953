"""
Equipment head records from line visits.

Older visits stored a single error per head (error/fixed/notes); current
visits store a list of issues. normalize_head upgrades the legacy shape.
"""

from pydantic import BaseModel, Field


class Issue(BaseModel):
    type: str
    fixed: str = "na"
    notes: str = ""


class LegacyHead(BaseModel):
    id: int
    status: str = "running"
    error: str | None = None
    fixed: str | None = None
    notes: str | None = None


class CurrentHead(BaseModel):
    id: int
    status: str = "running"
    issues: list[Issue] = Field(default_factory=list)


def normalize_head(head: dict | LegacyHead | CurrentHead) -> CurrentHead:
    """Return the multi-issue shape for any stored head."""
    if isinstance(head, CurrentHead):
        return head
    if isinstance(head, dict):
        if isinstance(head.get("issues"), list):
            return CurrentHead.model_validate(head)
        head = LegacyHead.model_validate(head)

    issues = []
    if head.error and head.error != "None":
        issues.append(Issue(type=head.error, fixed=head.fixed or "na", notes=head.notes or ""))
    return CurrentHead(id=head.id, status=head.status, issues=issues)
