"""Entity record model used by the text splicer."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EntityRecord(BaseModel):
    """One span of the original tweet text and its HTML replacement."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(..., ge=0, description="First character offset (inclusive)")
    end: int = Field(..., ge=0, description="Last character offset (exclusive)")
    replacement: str = Field(..., description="Markup substituted for the span")

    @field_validator("end")
    @classmethod
    def end_must_not_precede_start(cls, v, info):
        """Validate that end >= start."""
        if "start" in info.data and v < info.data["start"]:
            raise ValueError(f"End ({v}) must be >= start ({info.data['start']})")
        return v

    @property
    def length(self) -> int:
        """Number of original characters consumed by the span."""
        return self.end - self.start
