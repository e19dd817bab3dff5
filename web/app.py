from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import PlainTextResponse, Response
from starlette.requests import Request

from slide_shrink_bot.processor import CannotShrink, ParseError, SerializeError, shrink_pdf_bytes
from slide_shrink_bot.settings import Settings
from web.auth import require_basic_auth

log = logging.getLogger("slide_shrink.web")

app = FastAPI(title="Slide Shrink Web")
app.state.settings = Settings.from_env()


@app.get("/healthz", response_class=PlainTextResponse)
def healthz():
    return "ok"


@app.post("/api/shrink", dependencies=[Depends(require_basic_auth)])
async def api_shrink(request: Request, filename: str = "slides.pdf"):
    """Shrink the PDF sent as the raw request body."""
    settings: Settings = request.app.state.settings
    data = await request.body()
    if not data:
        raise HTTPException(status_code=400, detail="Empty request body")
    if len(data) > settings.internal_max_file_size:
        raise HTTPException(status_code=413, detail="File is too large")

    try:
        result = await asyncio.to_thread(
            shrink_pdf_bytes,
            data,
            text_fallback=settings.text_fallback,
            compress=settings.compress_output,
        )
    except ParseError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CannotShrink as e:
        raise HTTPException(status_code=422, detail=f"Can not shrink: {e}")
    except SerializeError as e:
        log.exception("Failed to write result for %s", filename)
        raise HTTPException(status_code=500, detail=str(e))

    stem = re.sub(r"[^A-Za-z0-9._-]+", "_", Path(filename).stem).strip("_") or "slides"
    out_name = f"{stem}_slides.pdf"
    return Response(
        content=result.data,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{out_name}"',
            "X-Original-Size": str(len(data)),
            "X-Compressed-Size": str(len(result.data)),
            "X-Pages-Before": str(result.pages_before),
            "X-Pages-After": str(result.pages_after),
            "X-Slide-Source": result.source,
        },
    )
