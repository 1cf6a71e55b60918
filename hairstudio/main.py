from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from hairstudio.config import get_settings
from hairstudio.handlers import generate_handler, image_handler, info_handler
from hairstudio.models import ErrorResponse, InvalidAspectRatioError
from hairstudio.services.gemini import get_gemini_client
from hairstudio.utils.image_ops import ImageProcessingError
from hairstudio.utils.uploads import UploadRejectedError

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    yield
    if get_gemini_client.cache_info().currsize:
        await get_gemini_client().close()
        get_gemini_client.cache_clear()


app = FastAPI(title="HairStudio API", lifespan=lifespan)

app.include_router(generate_handler.router)
app.include_router(image_handler.router)
app.include_router(info_handler.router)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(UploadRejectedError)
async def upload_rejected(_: Request, exc: UploadRejectedError):
    logger.info("Rejected upload: %s", exc.message)
    return _error(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def invalid_request(_: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        # loc is ("body" | "query", field, ...); report the field path only
        field = ".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0])
        problems.append(f"{field}: {err['msg']}")
    logger.info("Rejected request: %s", problems)
    return _error(422, "Invalid request: " + "; ".join(problems))


@app.exception_handler(InvalidAspectRatioError)
async def invalid_aspect_ratio(_: Request, exc: InvalidAspectRatioError):
    return _error(400, str(exc))


@app.exception_handler(ImageProcessingError)
async def image_processing_failed(_: Request, exc: ImageProcessingError):
    logger.warning("Image processing failed: %s", exc)
    return _error(422, str(exc))


@app.exception_handler(Exception)
async def unhandled(_: Request, exc: Exception):
    logger.exception("Pipeline error: %s", exc)
    return _error(500, f"System error: {exc}")


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}
