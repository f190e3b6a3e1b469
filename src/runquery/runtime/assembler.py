"""
Response assembler - builds the final response of a run.

Handles:
- Including data only when it is not None
- Formatting errors (and logging their traces in debug mode)
- Closing the extension lifecycle and attaching its output
- Applying the caller's format_response hook last
"""

from __future__ import annotations

from typing import Any, Optional

from ..core.defs import RequestDescriptor
from ..extensions.base import ExtensionStack
from .formatter import ErrorFormatter, log_error_trace


class ResponseAssembler:
    """
    Assembles the response dict from data, errors and extensions.

    Usage:
        assembler = ResponseAssembler()
        response = assembler.assemble(outcome.data, outcome.errors, stack, descriptor, debug=True)
    """

    def assemble(
        self,
        data: Optional[dict[str, Any]],
        errors: Optional[list[Any]],
        stack: Optional[ExtensionStack],
        descriptor: RequestDescriptor,
        debug: bool = False,
    ) -> Any:
        """
        Assemble the final response.

        Args:
            data: Execution data, omitted from the response when None
            errors: Raw errors, formatted through descriptor.format_error
            stack: Extension stack of the request, if any
            descriptor: The request being answered
            debug: Log each raw error's trace

        Returns:
            Response dict, or whatever descriptor.format_response returns
        """
        response: dict[str, Any] = {}
        if data is not None:
            response["data"] = data

        if errors:
            response["errors"] = ErrorFormatter(descriptor.format_error).format(errors)
            if debug:
                for error in errors:
                    log_error_trace(error)

        if stack is not None:
            stack.execution_did_end()
            stack.request_did_end()
            response["extensions"] = stack.format()

        if descriptor.format_response is not None:
            return descriptor.format_response(response, descriptor)
        return response
