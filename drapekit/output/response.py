"""
Response mapping — TransformResult to an HTTP-shaped response.

The proxy that forwards images upstream is not part of this package,
but it answers browsers directly, so the status codes, body shape and
cross-origin headers it needs are fixed here:

- 200: the camelCase tutorial plus a `meta` block
- 422: a typed pipeline failure (bad generation); `retry` tells the
  client to re-query the model
- 500: anything else
"""

from dataclasses import dataclass, field
from typing import Any

from drapekit.ir.schema import TransformResult

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

JSON_HEADERS: dict[str, str] = {**CORS_HEADERS, "Content-Type": "application/json"}


@dataclass(frozen=True)
class ApiResponse:
    status_code: int
    body: dict[str, Any]
    headers: dict[str, str] = field(default_factory=lambda: dict(JSON_HEADERS))


def build_response(result: TransformResult) -> ApiResponse:
    """Map a pipeline result onto status code, JSON body and headers."""
    if result.ok and result.document is not None:
        body = result.document.to_wire()
        body["meta"] = {
            "requestId": result.request_id,
            "status": result.status.value,
            "decodeTier": result.decode_tier,
            "salvaged": result.salvaged,
            "warnings": [d.code for d in result.diagnostics if d.level.value == "warning"],
        }
        return ApiResponse(status_code=200, body=body)

    error = result.error
    if error is not None and error.retryable:
        return ApiResponse(
            status_code=422,
            body={
                "error": error.message,
                "code": error.code,
                "retry": True,
                "requestId": result.request_id,
            },
        )

    return ApiResponse(
        status_code=500,
        body={
            "error": error.message if error else "Internal error",
            "code": error.code if error else "INTERNAL_ERROR",
            "retry": False,
            "requestId": result.request_id,
        },
    )
