"""
Comparison report

Serializable summary of a comparison run, handed to whatever stores or
downloads it. Field names serialize in camelCase.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from visual_diff_toolkit.visual_testing.models import ComparisonMethod


class ComparisonReport(BaseModel):
    """Report for one comparison run"""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    diff_percentage: float = Field(ge=0.0, le=100.0)
    is_passed: bool
    method: ComparisonMethod
    threshold: float = Field(ge=0.0)
    ignored_regions_count: int = Field(ge=0)
    differing_pixels: int = Field(ge=0)
    total_pixels: int = Field(gt=0)
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, indent: int = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)
