"""
Tracing extension - request timing and per-resolver timings.

Response contribution:
    "tracing": {
        "version": 1,
        "startTime": "2024-01-01T00:00:00.000000Z",
        "endTime": "...",
        "duration": <ns>,
        "execution": {
            "resolvers": [
                {"path": ["hero", "name"], "parentType": "Hero", "fieldName": "name",
                 "returnType": "String", "startOffset": <ns>, "duration": <ns>}
            ]
        }
    }
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Optional

from graphql import GraphQLResolveInfo

from .base import EndHandler, GraphQLExtension


def _iso(moment: Optional[datetime]) -> Optional[str]:
    if moment is None:
        return None
    return moment.isoformat().replace("+00:00", "Z")


class TracingExtension(GraphQLExtension):
    """Records when the request started and ended and how long each resolver took."""

    def __init__(self):
        self.start_wall_time: Optional[datetime] = None
        self.end_wall_time: Optional[datetime] = None
        self._start_ns: Optional[int] = None
        self.duration: Optional[int] = None
        self.resolver_calls: list[dict[str, Any]] = []

    def _offset(self) -> int:
        if self._start_ns is None:
            return 0
        return time.perf_counter_ns() - self._start_ns

    def request_did_start(self) -> None:
        self.start_wall_time = datetime.now(timezone.utc)
        self._start_ns = time.perf_counter_ns()

    def will_resolve_field(
        self,
        source: Any,
        args: dict[str, Any],
        context: Any,
        info: GraphQLResolveInfo,
    ) -> EndHandler:
        call = {
            "path": info.path.as_list(),
            "parentType": str(info.parent_type),
            "fieldName": info.field_name,
            "returnType": str(info.return_type),
            "startOffset": self._offset(),
        }
        self.resolver_calls.append(call)

        def did_resolve(error, result) -> None:
            call["duration"] = self._offset() - call["startOffset"]

        return did_resolve

    def request_did_end(self) -> None:
        self.duration = self._offset()
        self.end_wall_time = datetime.now(timezone.utc)

    def format(self) -> tuple[str, Any]:
        return (
            "tracing",
            {
                "version": 1,
                "startTime": _iso(self.start_wall_time),
                "endTime": _iso(self.end_wall_time),
                "duration": self.duration,
                "execution": {"resolvers": self.resolver_calls},
            },
        )
