from __future__ import annotations

from fastapi import APIRouter

from crumb.app.schemas.imports import (
    DurationExtractRequest,
    DurationExtractResponse,
    DurationItem,
    DurationParseRequest,
    DurationParseResponse,
)
from crumb.services.durations import (
    extract_durations_from_instruction,
    format_editable_duration,
    parse_editable_duration_to_seconds,
)

router = APIRouter(prefix="/durations", tags=["durations"])


@router.post("/extract", response_model=DurationExtractResponse)
def extract_durations(body: DurationExtractRequest) -> DurationExtractResponse:
    items = [
        DurationItem(seconds=d.seconds, text=d.text, display=format_editable_duration(d.seconds))
        for d in extract_durations_from_instruction(body.text)
    ]
    return DurationExtractResponse(durations=items)


@router.post("/parse", response_model=DurationParseResponse)
def parse_duration(body: DurationParseRequest) -> DurationParseResponse:
    result = parse_editable_duration_to_seconds(body.value)
    if not result.ok:
        return DurationParseResponse(ok=False, reason=result.reason)
    return DurationParseResponse(
        ok=True,
        seconds=result.seconds,
        display=format_editable_duration(result.seconds),
    )
