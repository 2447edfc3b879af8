"""Request models for the Coralogix DataPrime query API."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .time_utils import DateRange


class QuerySyntax(str, Enum):
    """Query language understood by the backend."""
    LUCENE = "QUERY_SYNTAX_LUCENE"
    DATAPRIME = "QUERY_SYNTAX_DATAPRIME"


class QueryTier(str, Enum):
    """Storage tier the query runs against."""
    FREQUENT_SEARCH = "TIER_FREQUENT_SEARCH"
    # Declared by the API; no tool selects it yet
    ARCHIVE = "TIER_ARCHIVE"


DEFAULT_SOURCE = "logs"


class QueryMetadata(BaseModel):
    """Metadata block of a DataPrime query request."""

    model_config = ConfigDict(populate_by_name=True)

    syntax: QuerySyntax
    tier: QueryTier = QueryTier.FREQUENT_SEARCH
    default_source: Optional[str] = Field(default=None, alias="defaultSource")
    start_date: Optional[str] = Field(default=None, alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")
    limit: Optional[int] = None


class QueryRequest(BaseModel):
    """Body posted to the DataPrime query endpoint."""

    query: str
    metadata: QueryMetadata

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the JSON body expected by Coralogix."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def dataprime(cls, query: str, window: Optional[DateRange] = None) -> "QueryRequest":
        """Build a DataPrime request against the log stream on the frequent-search tier."""
        return cls(
            query=query,
            metadata=QueryMetadata(
                syntax=QuerySyntax.DATAPRIME,
                tier=QueryTier.FREQUENT_SEARCH,
                default_source=DEFAULT_SOURCE,
                start_date=window.start_date if window else None,
                end_date=window.end_date if window else None,
            ),
        )

    @classmethod
    def lucene(cls, query: str, window: DateRange, limit: Optional[int] = None) -> "QueryRequest":
        """Build a Lucene request on the frequent-search tier."""
        return cls(
            query=query,
            metadata=QueryMetadata(
                syntax=QuerySyntax.LUCENE,
                tier=QueryTier.FREQUENT_SEARCH,
                start_date=window.start_date,
                end_date=window.end_date,
                limit=limit,
            ),
        )
