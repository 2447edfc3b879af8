"""Shared parameter and result models for the Coralogix tools."""

import json
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


TIME_RANGE_DESCRIPTION = 'Time range (e.g., "1h", "24h", "7d")'


class ToolParams(BaseModel):
    """Base class for tool arguments; accepts camelCase or snake_case keys."""

    model_config = ConfigDict(populate_by_name=True)

    def echo(self) -> Dict[str, Any]:
        """Arguments as they are echoed back in the result envelope."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ToolResult(BaseModel):
    """Base class for the JSON envelope returned by every tool."""

    model_config = ConfigDict(populate_by_name=True)

    def to_json(self) -> str:
        """Serialize the envelope with camelCase keys."""
        return json.dumps(
            self.model_dump(mode="json", by_alias=True),
            indent=2,
            default=str
        )


class TimeWindowResult(ToolResult):
    """Envelope carrying the resolved query window."""

    time_range: Dict[str, str] = Field(alias="timeRange")
