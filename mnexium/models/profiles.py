"""Subject profiles: structured fields the service keeps per subject."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProfileFieldUpdate(BaseModel):
    """One field write in PATCH /profiles."""

    field_key: str = Field(..., min_length=1)
    value: Any
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)


class Profile(BaseModel):
    model_config = ConfigDict(extra="allow")

    subject_id: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)

    def get(self, field_key: str, default: Any = None) -> Any:
        """Field value, unwrapping `{value: ...}` entries."""
        entry = self.data.get(field_key, default)
        if isinstance(entry, dict) and "value" in entry:
            return entry["value"]
        return entry
