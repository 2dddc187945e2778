import logging
import os

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse
from pydantic import ValidationError

from .config import Settings, get_settings
from .errors import CommentServiceError
from .fetcher import build_fetcher
from .generator import OpenAITextGenerator
from .pipeline import CommentPipeline
from .schemas import ErrorResponse, GenerateCommentsRequest, GenerateCommentsResponse

logger = logging.getLogger(__name__)

PACKAGE_STATIC_DIR = os.path.join(os.path.dirname(__file__), "static")
FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def build_pipeline(settings: Settings) -> CommentPipeline:
    return CommentPipeline(build_fetcher(settings), OpenAITextGenerator(settings), settings)


def get_pipeline(request: Request) -> CommentPipeline:
    return request.app.state.pipeline


async def read_generate_request(request: Request) -> GenerateCommentsRequest:
    """Accept the submission as a JSON body or as an HTML form post."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        data = {key: form.get(key) for key in ("link", "count")}
    else:
        raw = await request.body()
        try:
            data = await request.json() if raw.strip() else {}
        except ValueError:
            raise RequestValidationError(
                [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": {}}]
            )
    try:
        return GenerateCommentsRequest.model_validate(data)
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def create_app(settings: Settings | None = None, pipeline: CommentPipeline | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    index_path = os.path.join(settings.static_dir or PACKAGE_STATIC_DIR, "index.html")
    if not os.path.isfile(index_path):
        logger.warning("Landing page %s not found", index_path)

    app = FastAPI(title="instacomment")
    app.state.settings = settings
    app.state.pipeline = pipeline or build_pipeline(settings)

    @app.exception_handler(CommentServiceError)
    def handle_service_error(request: Request, exc: CommentServiceError):
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    def handle_validation_error(request: Request, exc: RequestValidationError):
        return error_response(400, "Invalid request body.")

    @app.get("/", include_in_schema=False)
    def index():
        if not os.path.isfile(index_path):
            return error_response(404, "Not found.")
        return FileResponse(index_path)

    @app.post("/generate", response_model=GenerateCommentsResponse)
    def generate(
        req: GenerateCommentsRequest = Depends(read_generate_request),
        pipeline: CommentPipeline = Depends(get_pipeline),
    ):
        try:
            result = pipeline.run(req.link, req.count)
        except CommentServiceError as e:
            logger.info("Request failed: %s", e.message)
            raise
        except Exception as e:
            logger.exception("Unhandled error while generating comments for %s", req.link)
            raise CommentServiceError("Internal server error") from e
        return GenerateCommentsResponse(caption=result.caption, comments=result.comments)

    return app
