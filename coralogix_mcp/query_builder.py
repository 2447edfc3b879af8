"""DataPrime and Lucene query construction utilities."""

import re
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence


class QueryBuildError(ValueError):
    """Raised when tool arguments cannot be turned into a valid query."""
    pass


class AggregationType(str, Enum):
    COUNT = "count"
    SUM = "sum"
    AVG = "avg"
    MIN = "min"
    MAX = "max"


class QueryType(str, Enum):
    """Analysis performed by advanced_dataprime_query."""
    ERROR_ANALYSIS = "error_analysis"
    PERFORMANCE_ANALYSIS = "performance_analysis"
    USER_JOURNEY = "user_journey"
    AGGREGATED_METRICS = "aggregated_metrics"
    LOG_PARSING = "log_parsing"
    ENRICHED_ANALYSIS = "enriched_analysis"
    BASIC = "basic"


class ParsePattern(str, Enum):
    """Regex extraction used by the log_parsing analysis."""
    API_LOGS = "api_logs"
    USER_ACTIVITY = "user_activity"
    DATABASE_LOGS = "database_logs"
    KEY_VALUE = "key_value"


class QueryTemplate(str, Enum):
    """Canned queries offered by custom_dataprime_query."""
    TIME_SERIES_ANALYSIS = "time_series_analysis"
    TOP_ERRORS_BY_USER = "top_errors_by_user"
    API_PERFORMANCE_MONITORING = "api_performance_monitoring"
    CUSTOM = "custom"
    BASIC = "basic"


SOURCE_LOGS = "source logs"

# Lucene metadata fields used by search_logs
APPLICATION_FIELD = "coralogix.metadata.applicationName"
SUBSYSTEM_FIELD = "coralogix.metadata.subsystemName"
SEVERITY_FIELD = "coralogix.metadata.severity"

CONTEXT_WINDOW = "5m"

_FIELD_PATTERN = re.compile(r'^[A-Za-z_@][\w@.\-]*$')
_ORDER_BY_PATTERN = re.compile(r'^(\$[dlm]\.)?[A-Za-z_@][\w@.\-]*$')

PARSE_PATTERN_FRAGMENTS: Dict[ParsePattern, str] = {
    ParsePattern.API_LOGS: (
        r" | extract $d.log into $d.parsed using regexp(e=/(?<method>\w+)\s+(?<path>\/[^\s]*)\s+(?<status>\d+)\s+(?<response_time>\d+)ms/)"
        " | filter $d.parsed.method != null"
    ),
    ParsePattern.USER_ACTIVITY: (
        r" | extract $d.log into $d.parsed using regexp(e=/user_id=(?<user_id>\w+)\s+action=(?<action>\w+)/)"
        " | filter $d.parsed.user_id != null"
    ),
    ParsePattern.DATABASE_LOGS: (
        r" | extract $d.log into $d.parsed using regexp(e=/query_time=(?<query_time>\d+\.\d+)\s+query=(?<query>[^\n]+)/)"
        " | filter $d.parsed.query_time != null"
    ),
    ParsePattern.KEY_VALUE: (
        r" | extract $d.log into $d.parsed using regexp(e=/(?<key>\w+)=(?<value>[^\s]+)/)"
        " | filter $d.parsed.key != null"
    ),
}

PATTERN_EXTRACTION = (
    r" | extract $d.log into $d.pattern using regexp(e=/^(?<prefix>\w+:\s*)?(?<level>\w+)?\s*(?<message>.{0,50})/)"
)


def escape_literal(value: Any) -> str:
    """
    Escape a value for use inside a double-quoted query literal.

    Args:
        value: Value to embed; non-strings are converted the way JSON renders them

    Returns:
        Escaped string without surrounding quotes
    """
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif value is None:
        text = "null"
    else:
        text = str(value)
    return text.replace('\\', '\\\\').replace('"', '\\"')


def quote_literal(value: Any) -> str:
    """Render a value as an escaped double-quoted literal."""
    return f'"{escape_literal(value)}"'


def validate_field_path(field: str) -> str:
    """
    Validate a field name placed after a field-path marker such as ``$d.``.

    Raises:
        QueryBuildError: If the field name could break the query syntax
    """
    if not isinstance(field, str) or not _FIELD_PATTERN.match(field):
        raise QueryBuildError(f"Invalid field name: {field!r}")
    return field


class DataPrimeQueryBuilder:
    """Builder class for constructing Coralogix queries from tool arguments."""

    def build_search_query(
        self,
        query: str,
        applications: Optional[Sequence[str]] = None,
        subsystems: Optional[Sequence[str]] = None,
        severities: Optional[Sequence[str]] = None
    ) -> str:
        """
        Build a Lucene query with metadata filters.

        Args:
            query: Base Lucene query text, used unchanged
            applications: Application names to match (OR-joined)
            subsystems: Subsystem names to match (OR-joined)
            severities: Severities to match (OR-joined)

        Returns:
            Lucene query string
        """
        filters = []
        for field, values in (
            (APPLICATION_FIELD, applications),
            (SUBSYSTEM_FIELD, subsystems),
            (SEVERITY_FIELD, severities),
        ):
            if values:
                clauses = " OR ".join(f"{field}:{quote_literal(value)}" for value in values)
                filters.append(f"({clauses})")

        if not filters:
            return query

        return f"{query} AND {' AND '.join(filters)}"

    def build_aggregation_query(
        self,
        group_by: Sequence[str],
        aggregations: Optional[Sequence[Mapping[str, Any]]] = None,
        filters: Optional[Mapping[str, Any]] = None
    ) -> str:
        """
        Build a DataPrime groupby/aggregate query.

        Args:
            group_by: Data fields to group by
            aggregations: Specs like ``{"type": "sum", "field": "bytes"}``
            filters: Equality filters on data fields

        Returns:
            DataPrime query string
        """
        if not group_by:
            raise QueryBuildError("At least one groupBy field must be provided")

        query = SOURCE_LOGS

        for key, value in (filters or {}).items():
            query += f" | filter $d.{validate_field_path(key)} == {quote_literal(value)}"

        group_fields = ", ".join(f"$d.{validate_field_path(field)}" for field in group_by)
        query += f" | groupby {group_fields}"

        if aggregations:
            expressions = [self._aggregation_expression(agg) for agg in aggregations]
            query += f" aggregate {', '.join(expressions)}"
        else:
            query += " aggregate count() as count"

        return query

    def _aggregation_expression(self, aggregation: Mapping[str, Any]) -> str:
        """Render one aggregation spec, falling back to count() for unknown types."""
        try:
            agg_type = AggregationType(aggregation.get("type"))
        except ValueError:
            agg_type = AggregationType.COUNT

        if agg_type is AggregationType.COUNT:
            return "count() as count"

        field = validate_field_path(aggregation.get("field"))
        return f"{agg_type.value}($d.{field}) as {agg_type.value}_{field}"

    def build_list_applications_query(self) -> str:
        """Build the query listing applications by log volume."""
        return (
            f"{SOURCE_LOGS} | groupby $l.applicationname aggregate count() as log_count"
            " | sort log_count desc | limit 100"
        )

    def build_list_subsystems_query(self, applications: Optional[Sequence[str]] = None) -> str:
        """Build the query listing subsystems, optionally for some applications."""
        query = SOURCE_LOGS

        if applications:
            app_filters = " OR ".join(
                f"$l.applicationname == {quote_literal(app)}" for app in applications
            )
            query += f" | filter ({app_filters})"

        query += " | groupby $l.subsystemname aggregate count() as log_count | sort log_count desc | limit 100"
        return query

    def build_log_lookup_query(self, log_id: str) -> str:
        """Build the query locating a single log entry by its id."""
        return f"{SOURCE_LOGS} | filter $m.logid == {quote_literal(log_id)} | limit 1"

    def build_log_context_query(self, timestamp: Optional[str], context_size: int) -> str:
        """
        Build the query returning logs around a timestamp.

        Without a timestamp the time filter is left out entirely.
        """
        query = SOURCE_LOGS

        if timestamp:
            ts = quote_literal(timestamp)
            query += (
                f" | filter $m.timestamp >= {ts} - {CONTEXT_WINDOW}"
                f" AND $m.timestamp <= {ts} + {CONTEXT_WINDOW}"
            )

        query += f" | sort $m.timestamp | limit {context_size * 2}"
        return query

    def build_advanced_query(
        self,
        query_type: QueryType,
        application: Optional[str] = None,
        subsystem: Optional[str] = None,
        severity: Optional[str] = None,
        user_id: Optional[str] = None,
        interval: str = "5m",
        parse_pattern: ParsePattern = ParsePattern.API_LOGS
    ) -> str:
        """
        Build one of the specialized analysis queries.

        Args:
            query_type: Analysis to perform
            application: Optional application filter
            subsystem: Optional subsystem filter
            severity: Optional severity filter, upper-cased
            user_id: Optional user id filter
            interval: Bin size for aggregated_metrics
            parse_pattern: Extraction pattern for log_parsing

        Returns:
            DataPrime query string
        """
        query = SOURCE_LOGS

        filters = []
        if application:
            filters.append(f"$l.applicationname == {quote_literal(application)}")
        if subsystem:
            filters.append(f"$l.subsystemname == {quote_literal(subsystem)}")
        if severity:
            filters.append(f"$m.severity == {quote_literal(severity.upper())}")
        if user_id:
            filters.append(f"$d.user_id == {quote_literal(user_id)}")

        if filters:
            query += f" | filter {' AND '.join(filters)}"

        handler = ANALYSIS_HANDLERS[QueryType(query_type)]
        return query + handler(
            user_id=user_id,
            interval=interval,
            parse_pattern=ParsePattern(parse_pattern),
        )

    def build_pattern_analysis_query(self, application: str) -> str:
        """Build the log pattern categorization query for one application."""
        return (
            f"{SOURCE_LOGS} | filter $l.applicationname == {quote_literal(application)}"
            f"{PATTERN_EXTRACTION}"
            " | groupby $d.pattern.level, $d.pattern.prefix aggregate count() as pattern_count"
            " | sort pattern_count desc | limit 50"
        )

    def build_security_queries(self, severity: str = "WARNING") -> List[str]:
        """
        Build the three security analysis queries.

        Returns:
            Failed logins by IP, errors by severity and application above the
            severity floor, and suspicious activity by action and IP, in that order
        """
        return [
            f'{SOURCE_LOGS} | filter $d.log contains "failed" AND $d.log contains "login"'
            " | groupby $d.ip_address aggregate count() as failed_attempts"
            " | sort failed_attempts desc | limit 20",

            f"{SOURCE_LOGS} | filter $m.severity >= {quote_literal(severity)}"
            " | groupby $m.severity, $l.applicationname aggregate count() as error_count"
            " | sort error_count desc",

            f'{SOURCE_LOGS} | filter $d.log contains "suspicious" OR $d.log contains "unauthorized"'
            ' OR $d.log contains "blocked"'
            " | groupby $d.action, $d.ip_address aggregate count() as incident_count"
            " | sort incident_count desc | limit 30",
        ]

    def build_custom_query(
        self,
        template: QueryTemplate,
        custom_query: Optional[str] = None,
        application: Optional[str] = None,
        limit: Optional[int] = None,
        order_by: Optional[str] = None,
        interval: Optional[str] = None
    ) -> str:
        """
        Build a templated or custom DataPrime query.

        Args:
            template: Canned template, or ``custom`` to use ``custom_query``
            custom_query: Query text for the custom template
            application: Application filter injected after the source clause
            limit: Optional row limit appended to the query
            order_by: Optional field appended as a descending sort
            interval: Bin size for time_series_analysis

        Returns:
            DataPrime query string

        Raises:
            QueryBuildError: If the custom template is used without a query
        """
        template = QueryTemplate(template)

        if template is QueryTemplate.TIME_SERIES_ANALYSIS:
            query = (
                f"{SOURCE_LOGS} | groupby bin($m.timestamp, {quote_literal(interval or '1h')})"
                " aggregate count() as log_count, count_distinct($l.applicationname) as unique_apps"
                " | sort timestamp"
            )
        elif template is QueryTemplate.TOP_ERRORS_BY_USER:
            query = (
                f'{SOURCE_LOGS} | filter $m.severity == "ERROR" | filter $d.user_id != null'
                " | groupby $d.user_id aggregate count() as error_count"
                " | sort error_count desc | limit 20"
            )
        elif template is QueryTemplate.API_PERFORMANCE_MONITORING:
            query = (
                f"{SOURCE_LOGS} | filter $d.response_time != null"
                " | groupby $d.endpoint aggregate avg($d.response_time) as avg_response_time,"
                " count() as request_count, percentile($d.response_time, 95) as p95_response_time"
                " | sort avg_response_time desc"
            )
        elif template is QueryTemplate.CUSTOM:
            if not custom_query:
                raise QueryBuildError("Custom query is required when using custom template")
            query = custom_query
        else:
            query = f"{SOURCE_LOGS} | limit 100"

        if application:
            query = query.replace(
                SOURCE_LOGS,
                f"{SOURCE_LOGS} | filter $l.applicationname == {quote_literal(application)}",
                1
            )

        if limit is not None:
            query += f" | limit {int(limit)}"

        if order_by:
            if not _ORDER_BY_PATTERN.match(order_by):
                raise QueryBuildError(f"Invalid orderBy field: {order_by!r}")
            query += f" | sort {order_by} desc"

        return query


def _error_analysis(**_: Any) -> str:
    return (
        ' | filter $m.severity == "ERROR"'
        " | groupby $d.error_type, $l.applicationname aggregate count() as error_count"
        " | sort error_count desc"
    )


def _performance_analysis(**_: Any) -> str:
    return (
        " | filter $d.response_time != null"
        " | groupby $l.applicationname aggregate avg($d.response_time) as avg_response_time,"
        " max($d.response_time) as max_response_time, min($d.response_time) as min_response_time"
    )


def _user_journey(user_id: Optional[str] = None, **_: Any) -> str:
    if user_id:
        return " | sort $m.timestamp | limit 1000"
    return (
        " | filter $d.user_id != null"
        " | groupby $d.user_id aggregate count() as event_count"
        " | sort event_count desc | limit 50"
    )


def _aggregated_metrics(interval: str = "5m", **_: Any) -> str:
    return (
        f" | groupby bin($m.timestamp, {quote_literal(interval)}) aggregate count() as log_count"
        " | sort timestamp"
    )


def _log_parsing(parse_pattern: ParsePattern = ParsePattern.API_LOGS, **_: Any) -> str:
    return PARSE_PATTERN_FRAGMENTS[parse_pattern]


def _enriched_analysis(**_: Any) -> str:
    return (
        " | enrich $d.ip_address from ip_enrichment on ip"
        " | filter $d.country != null"
        " | groupby $d.country aggregate count() as requests_by_country"
        " | sort requests_by_country desc"
    )


def _basic(**_: Any) -> str:
    return " | limit 100"


ANALYSIS_HANDLERS: Dict[QueryType, Callable[..., str]] = {
    QueryType.ERROR_ANALYSIS: _error_analysis,
    QueryType.PERFORMANCE_ANALYSIS: _performance_analysis,
    QueryType.USER_JOURNEY: _user_journey,
    QueryType.AGGREGATED_METRICS: _aggregated_metrics,
    QueryType.LOG_PARSING: _log_parsing,
    QueryType.ENRICHED_ANALYSIS: _enriched_analysis,
    QueryType.BASIC: _basic,
}
