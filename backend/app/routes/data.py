"""GET /data/{letter}.json (cached shard proxy) and GET /reload-phonetics."""

import logging

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse, Response

from app.container import Services
from app.dependencies import get_datasets, get_services
from app.errors import DatasetLoadError
from app.models import ReloadOut
from app.services.datasets import LETTERS, DatasetStore
from app.services.etag import etag_matches

logger = logging.getLogger(__name__)

router = APIRouter(tags=["data"])

SHARD_CACHE_CONTROL = "public, max-age=31536000, immutable"


@router.get("/data/{letter}.json")
async def letter_shard(
    letter: str,
    if_none_match: str | None = Header(None),
    datasets: DatasetStore = Depends(get_datasets),
):
    letter = letter.lower()
    if letter not in LETTERS:
        return JSONResponse(status_code=400, content={"error": "Invalid letter"})

    try:
        entry = await datasets.shard_entry(letter)
    except DatasetLoadError as exc:
        logger.error("Failed to proxy data for %s: %s", letter, exc)
        return JSONResponse(status_code=502, content={"error": "Upstream data unavailable"})

    headers = {"ETag": entry.fingerprint, "Cache-Control": SHARD_CACHE_CONTROL}
    if etag_matches(if_none_match, entry.fingerprint):
        return Response(status_code=304, headers=headers)
    return Response(content=entry.value.raw, media_type="application/json", headers=headers)


@router.get("/reload-phonetics", response_model=ReloadOut)
async def reload_phonetics(services: Services = Depends(get_services)):
    try:
        table = await services.datasets.reload_phonetics()
    except DatasetLoadError as exc:
        logger.error("Phonetic reload failed: %s", exc)
        return JSONResponse(status_code=500, content={"status": "error"})
    services.resolver.forget()
    return ReloadOut(status="success", entries=len(table))
