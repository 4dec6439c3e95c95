# crumb/app/routers/imports.py
from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool

from crumb.app.deps import get_extractor
from crumb.app.schemas.imports import ImportRequest, ImportResponse
from crumb.services.errors import (
    ExtractionFailedError,
    FetchFailedError,
    HttpStatusError,
    InvalidURLError,
    NetworkTimeoutError,
)
from crumb.services.extractor import RecipeExtractor
from crumb.services.models import Recipe
from crumb.services.urls import normalize_recipe_url

log = logging.getLogger("import")
router = APIRouter(tags=["import"])


def _error_detail(error_code: str, message: str) -> dict[str, str]:
    return {"error_code": error_code, "message": message}


def _collect_warnings(recipe: Recipe) -> list[str]:
    warnings = []
    if not recipe.image_url:
        warnings.append("No image found")
    if not recipe.author:
        warnings.append("No author found")
    if recipe.times is None:
        warnings.append("No prep or cook times found")
    return warnings


@router.post("/import", response_model=ImportResponse)
async def import_recipe(
    body: ImportRequest,
    extractor: RecipeExtractor = Depends(get_extractor),
) -> ImportResponse:
    t0 = time.time()
    try:
        url = normalize_recipe_url(body.url)
    except InvalidURLError as exc:
        raise HTTPException(status_code=400, detail=_error_detail(exc.kind, str(exc))) from exc

    log.info("import.start url=%s", url)
    try:
        recipe = await run_in_threadpool(extractor.extract, url)
    except InvalidURLError as exc:
        raise HTTPException(status_code=400, detail=_error_detail(exc.kind, str(exc))) from exc
    except NetworkTimeoutError as exc:
        log.warning("import.timeout url=%s dt=%.2fs", url, time.time() - t0)
        raise HTTPException(
            status_code=504,
            detail=_error_detail(exc.kind, "The recipe site took too long to respond."),
        ) from exc
    except HttpStatusError as exc:
        log.warning("import.http_error url=%s status=%d", url, exc.status_code)
        raise HTTPException(
            status_code=502,
            detail=_error_detail(exc.kind, f"The recipe site answered with HTTP {exc.status_code}."),
        ) from exc
    except FetchFailedError as exc:
        log.warning("import.unreachable url=%s error=%s", url, exc)
        raise HTTPException(
            status_code=502,
            detail=_error_detail(exc.kind, "We couldn't reach this page."),
        ) from exc
    except ExtractionFailedError as exc:
        log.info("import.no_recipe url=%s dt=%.2fs", url, time.time() - t0)
        raise HTTPException(
            status_code=422,
            detail=_error_detail(exc.kind, "We couldn't read a recipe from this page."),
        ) from exc

    log.info(
        "import.ok url=%s via=%s dt=%.2fs",
        url,
        recipe.extracted_by,
        time.time() - t0,
    )
    warnings = _collect_warnings(recipe)
    return ImportResponse(recipe=recipe, warnings=warnings or None)
