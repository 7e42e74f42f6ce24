"""POST /get-pronunciation: audio, phonetics and definitions for a word."""

import logging

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse, Response

from app.domain import PronunciationRequest
from app.errors import SynthesisError
from app.models import ErrorOut, PronunciationIn, ResponseDocument
from app.dependencies import get_orchestrator
from app.services.orchestrator import PronunciationOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pronunciation"])

CACHE_CONTROL = "private, max-age=604800"


@router.post(
    "/get-pronunciation",
    response_model=ResponseDocument,
    responses={304: {"description": "Not modified"}, 400: {"model": ErrorOut}, 500: {"model": ErrorOut}},
)
async def get_pronunciation(
    body: PronunciationIn,
    if_none_match: str | None = Header(None),
    orchestrator: PronunciationOrchestrator = Depends(get_orchestrator),
):
    # ValidationError propagates to the app-level handler (400)
    request = PronunciationRequest.build(body.word, body.accent, body.is_male, body.speed)

    try:
        outcome = await orchestrator.pronounce(request, if_none_match)
    except SynthesisError as exc:
        logger.error("Error processing %s: %s", request.word, exc)
        return _failure(request.word)
    except Exception:
        logger.exception("Unexpected failure processing %s", request.word)
        return _failure(request.word)

    cached = outcome.response
    if outcome.not_modified:
        return Response(status_code=304, headers={"ETag": cached.etag, "Cache-Control": CACHE_CONTROL})

    return JSONResponse(
        content=cached.document.to_json(),
        headers={
            "ETag": cached.etag,
            "Cache-Control": CACHE_CONTROL,
            "X-Cache": "HIT" if outcome.cache_hit else "MISS",
        },
    )


def _failure(word: str) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content=ErrorOut(
            error="Error processing pronunciation request",
            suggestion="Please try again in a moment",
            word=word,
        ).model_dump(),
    )
