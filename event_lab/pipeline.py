"""
End-to-end analysis pipeline.

Request → Coordinator → Contextual filters → Forward returns → Response.
Every failure is turned into a failure response carrying a suggestion.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import structlog

from .config.validation import ConfigValidator, ValidationError
from .engine import EngineCoordinator, EventAnalysis
from .errors import (
    DataQualityError,
    InputValidationError,
    RequestError,
    SystemFailureError,
)
from .filters.calendars import ContextFilter
from .filters.contextual import ContextualFilterService
from .metrics.forward_returns import PERFORMANCE_HEADERS, ForwardReturnsCalculator
from .models.parameters import EventKind
from .utils.time import WEEKDAY_NAMES, format_date

logger = structlog.get_logger(__name__)

REQUEST_FIELDS = (
    "event_kind", "ticker", "parameters", "context_filters", "additional_filters", "timeframes",
)
ADDITIONAL_FILTER_FIELDS = ("day_filter", "month_filter")

DATA_SUGGESTION = "Check the ticker symbol or try again once market data is available."
FAILURE_SUGGESTION = "Please try again or contact support if the problem persists."
ENGINE_SUGGESTION = "Please try again in a few minutes or try a different analysis type."


@dataclass(frozen=True)
class AnalysisRequest:
    """A structured analysis request."""
    event_kind: str
    ticker: str
    parameters: dict[str, Any] = field(default_factory=dict)
    context_filters: tuple[ContextFilter, ...] = ()
    additional_filters: dict[str, Any] = field(default_factory=dict)
    timeframes: Optional[dict[str, int]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AnalysisRequest":
        """
        Parse and validate a request mapping.

        Raises:
            InputValidationError: If the request shape is invalid
        """
        if not isinstance(data, Mapping):
            raise InputValidationError(
                "Request must be a mapping",
                errors=[ValidationError("request", "Must be a mapping", data)],
            )

        errors: list[ValidationError] = []

        for name in data:
            if name not in REQUEST_FIELDS:
                errors.append(ValidationError(name, "Unknown request field", data[name]))

        event_kind = data.get("event_kind")
        if not isinstance(event_kind, str) or not event_kind.strip():
            errors.append(ValidationError("event_kind", "Must be a non-empty string", event_kind))

        ticker = data.get("ticker")
        if not isinstance(ticker, str) or not ticker.strip():
            errors.append(ValidationError("ticker", "Must be a non-empty string", ticker))

        parameters = data.get("parameters") or {}
        if not isinstance(parameters, Mapping):
            errors.append(ValidationError("parameters", "Must be a mapping", parameters))

        context_filters: list[ContextFilter] = []
        raw_filters = data.get("context_filters") or []
        if not isinstance(raw_filters, (list, tuple)):
            errors.append(ValidationError("context_filters", "Must be a list of filter names", raw_filters))
        else:
            for raw in raw_filters:
                try:
                    context_filters.append(ContextFilter(raw.upper() if isinstance(raw, str) else raw))
                except ValueError:
                    errors.append(ValidationError(
                        "context_filters",
                        f"Must be one of {', '.join(f.value for f in ContextFilter)}",
                        raw
                    ))

        additional_filters = data.get("additional_filters") or {}
        errors.extend(cls._validate_additional_filters(additional_filters))

        timeframes = data.get("timeframes")
        if timeframes is not None:
            errors.extend(ConfigValidator.validate_timeframes(timeframes))

        if errors:
            raise InputValidationError(
                "Invalid analysis request: " + "; ".join(str(e) for e in errors),
                errors=errors,
            )

        if "day_filter" in additional_filters:
            additional_filters = {
                **additional_filters,
                "day_filter": [day.upper() for day in additional_filters["day_filter"]],
            }

        return cls(
            event_kind=event_kind.strip().upper(),
            ticker=ticker.strip().upper(),
            parameters=dict(parameters),
            context_filters=tuple(context_filters),
            additional_filters=dict(additional_filters),
            timeframes=dict(timeframes) if timeframes is not None else None,
        )

    @staticmethod
    def _validate_additional_filters(additional: Any) -> list[ValidationError]:
        if not isinstance(additional, Mapping):
            return [ValidationError("additional_filters", "Must be a mapping", additional)]

        errors = []
        for name in additional:
            if name not in ADDITIONAL_FILTER_FIELDS:
                errors.append(ValidationError(f"additional_filters.{name}", "Unknown filter option", additional[name]))

        day_filter = additional.get("day_filter")
        if day_filter is not None:
            if not isinstance(day_filter, (list, tuple)) or not all(
                isinstance(day, str) and day.upper() in WEEKDAY_NAMES for day in day_filter
            ):
                errors.append(ValidationError(
                    "additional_filters.day_filter",
                    "Must be a list of weekday names (e.g. MONDAY)",
                    day_filter
                ))

        month_filter = additional.get("month_filter")
        if month_filter is not None:
            if not isinstance(month_filter, (list, tuple)) or not all(
                isinstance(m, int) and not isinstance(m, bool) and 1 <= m <= 12 for m in month_filter
            ):
                errors.append(ValidationError(
                    "additional_filters.month_filter",
                    "Must be a list of month numbers 1-12",
                    month_filter
                ))

        return errors


class AnalysisPipeline:
    """Runs a request through detection, filtering and forward-return statistics."""

    def __init__(
        self,
        coordinator: EngineCoordinator,
        filter_service: Optional[ContextualFilterService] = None,
        calculator: Optional[ForwardReturnsCalculator] = None
    ):
        self.coordinator = coordinator
        config = coordinator.config_loader.defaults
        self.filter_service = filter_service or ContextualFilterService(config.filters)
        self.calculator = calculator or ForwardReturnsCalculator(config)
        self.logger = logger

    def run(self, request: Union[AnalysisRequest, Mapping[str, Any]]) -> dict[str, Any]:
        """
        Run one analysis.

        Returns:
            Success response, or failure response with ``error``,
            ``error_type`` and ``suggestion``; never raises
        """
        try:
            if not isinstance(request, AnalysisRequest):
                request = AnalysisRequest.from_dict(request)
            analysis = self.coordinator.analyze_event(
                request.event_kind, request.ticker, request.parameters
            )

        except RequestError as e:
            self.logger.warning("Analysis request rejected",
                                error=str(e),
                                error_type=type(e).__name__)
            response = self._failure(str(e), type(e).__name__, e.suggestion)
            if isinstance(e, InputValidationError):
                response["details"] = [str(error) for error in e.errors]
            return response

        except DataQualityError as e:
            self.logger.warning("Analysis data unavailable",
                                error=str(e),
                                error_type=type(e).__name__,
                                context=e.context)
            return self._failure(str(e), type(e).__name__, DATA_SUGGESTION)

        except SystemFailureError as e:
            self.logger.error("Analysis system failure",
                              error=str(e),
                              error_type=type(e).__name__,
                              context=e.context)
            return self._failure(str(e), type(e).__name__, FAILURE_SUGGESTION)

        except Exception as e:
            self.logger.error("Unexpected error during analysis",
                              error=str(e),
                              error_type=type(e).__name__)
            return self._failure("Analysis failed", type(e).__name__, FAILURE_SUGGESTION)

        engine_health = self.coordinator.get_engine_health_status()[analysis.kind.value]

        if not analysis.outcome.success:
            return self._failure(
                analysis.outcome.error or "Event analysis engine temporarily unavailable",
                "EngineExecutionError",
                analysis.outcome.fallback or ENGINE_SUGGESTION,
                engine_health=engine_health,
            )

        return self._build_response(request, analysis, engine_health)

    def _build_response(
        self,
        request: AnalysisRequest,
        analysis: EventAnalysis,
        engine_health: dict[str, Any]
    ) -> dict[str, Any]:
        result = analysis.outcome.unwrap()
        matches = list(result.matches)

        filtered = matches
        if request.context_filters and matches:
            filtered = self.filter_service.filter_items(
                matches, request.context_filters, request.additional_filters
            )
            self.logger.info("Context filters applied",
                             before=len(matches),
                             after=len(filtered))

        summary = dict(result.summary)
        performance_table: dict[str, Any]
        results: list[dict[str, Any]]

        if analysis.kind is EventKind.MACRO_EVENT:
            results = [
                {"signal": m.get("signal"), "date": format_date(m.date), "analysis": summary.get("signal")}
                for m in filtered
            ]
            performance_table = {
                "headers": list(PERFORMANCE_HEADERS),
                "rows": [],
                "message": "Forward returns are not computed for macro signals",
            }

        elif not filtered:
            report = self.calculator.empty_report(request.timeframes)
            results = []
            performance_table = report.performance_table
            message = f"No historical instances found for {analysis.kind.value} on {analysis.ticker}"
            if request.context_filters:
                message += " with applied context filters"
            summary["message"] = message

        else:
            # Self-sourced engines hand back the history they analyzed
            if analysis.series is None:
                self.logger.warning("No series for forward returns", ticker=analysis.ticker)
                report = self.calculator.empty_report(request.timeframes)
            else:
                report = self.calculator.calculate(analysis.series, filtered, request.timeframes)
            results = [row.to_dict() for row in report.results]
            performance_table = report.performance_table
            summary.update(report.summary)

        if request.context_filters:
            summary["context_filters"] = self.filter_service.get_filter_summary(
                request.context_filters, request.additional_filters
            )
            summary["filtered_matches"] = f"{len(filtered)} of {len(matches)} total matches"

        self.logger.info("Analysis completed",
                         event_kind=analysis.kind.value,
                         ticker=analysis.ticker,
                         matches=len(filtered))

        return {
            "success": True,
            "event_kind": analysis.kind.value,
            "ticker": analysis.ticker,
            "event_analysis": {
                "matches": len(filtered),
                "total_matches": len(matches),
                "summary": dict(result.summary),
            },
            "match_details": [m.to_dict() for m in filtered],
            "results": results,
            "summary": summary,
            "performance_table": performance_table,
            "engine_health": engine_health,
        }

    @staticmethod
    def _failure(
        error: str,
        error_type: str,
        suggestion: str,
        engine_health: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        response: dict[str, Any] = {
            "success": False,
            "error": error,
            "error_type": error_type,
            "suggestion": suggestion,
        }
        if engine_health is not None:
            response["engine_health"] = engine_health
        return response
