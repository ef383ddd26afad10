# server/http_app.py
from __future__ import annotations

import logging

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.config import Settings
from app.di import Container, build_container
from app.errors import NotFound, SandboxEscape, StorageIOError
from app.logging import configure_logging, log_operation
from app.validation import InvalidFilename, InvalidInput, NoData, validate_data, validate_path

logger = logging.getLogger(__name__)

# Internal error kind -> message returned to the user.
# Internal details go to the log only.
ERRORS = {
    "invalid_json": "Verify your JSON payload.",
    "invalid_path": 'Verify your path (must start with "/" and end with "<filename>.txt").',
    "invalid_filename": "Invalid filename.",
    "no_data": "There is no data to write to file.",
    "forbidden_path": "Path is outside of the storage root.",
    "write_failed": "Error creating/writing file.",
    "file_not_found": "File not found.",
    "path_not_found": "Path not found.",
    "internal": "Internal server error.",
}


class FileWriteRequest(BaseModel):
    path: str = ""
    data: str = ""


def _error(status: int, kind: str) -> JSONResponse:
    return JSONResponse({"error": ERRORS[kind]}, status_code=status)


def _invalid_input(err: InvalidInput) -> JSONResponse:
    if isinstance(err, InvalidFilename):
        return _error(400, "invalid_filename")
    if isinstance(err, NoData):
        return _error(400, "no_data")
    return _error(400, "invalid_path")


def create_app(container: Container | None = None) -> FastAPI:
    """
    Build the HTTP transport around a DI container.
    Endpoints are sync: FastAPI runs them on its threadpool, one worker per request.
    """
    container = container or build_container()
    settings = container.settings
    store = container.file_store
    resolver = container.resolver

    app = FastAPI(title="Sandboxed File API", version="0.1.0")
    app.state.container = container

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning("request validation failed: %s", exc.errors())
        if any((err.get("loc") or ("",))[0] == "body" for err in exc.errors()):
            return _error(400, "invalid_json")
        return _error(400, "invalid_path")

    @app.exception_handler(InvalidInput)
    async def invalid_input_handler(request: Request, exc: InvalidInput):
        logger.warning("invalid input: %s", exc)
        return _invalid_input(exc)

    @app.exception_handler(SandboxEscape)
    async def sandbox_escape_handler(request: Request, exc: SandboxEscape):
        logger.warning("confinement violation: %s", exc)
        return _error(403, "forbidden_path")

    @app.get("/file")
    def get_file(path: str = Query(...)):
        log_operation(logger, "file_read", {"path": path})
        location = resolver.resolve_file(validate_path(path, settings.FILE_SUFFIX))
        try:
            data = store.read(location)
        except NotFound as e:
            logger.info("Error getting file's data. Error: %s", e)
            return _error(404, "file_not_found")
        except StorageIOError:
            logger.exception("Error getting file's data")
            return _error(500, "internal")
        return {"data": data}

    @app.post("/file")
    def post_file(body: FileWriteRequest):
        log_operation(logger, "file_write", body.model_dump())
        vp = validate_path(body.path, settings.FILE_SUFFIX)
        vd = validate_data(body.data)
        location = resolver.resolve_file(vp)
        try:
            store.create(location, vd.data)
        except StorageIOError:
            logger.exception("Error creating/writing to file")
            return _error(500, "write_failed")
        return {"ok": True}

    @app.delete("/file")
    def delete_file(path: str = Query(...)):
        log_operation(logger, "file_delete", {"path": path})
        location = resolver.resolve_file(validate_path(path, settings.FILE_SUFFIX))
        try:
            store.delete(location)
        except NotFound as e:
            logger.info("Error deleting file. Error: %s", e)
            return _error(404, "file_not_found")
        except StorageIOError:
            logger.exception("Error deleting file")
            return _error(500, "internal")
        return {"ok": True}

    @app.get("/stats")
    def get_stats(path: str = Query(...)):
        log_operation(logger, "dir_stats", {"path": path})
        vp = validate_path(path)
        try:
            report = container.stats_engine.get_stats(vp)
        except NotFound as e:
            logger.info("Error getting stats. Error: %s", e)
            return _error(404, "path_not_found")
        except StorageIOError:
            logger.exception("Error getting stats")
            return _error(500, "internal")
        return report.to_dict()

    return app


if __name__ == "__main__":
    import uvicorn
    settings = Settings()
    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "server.http_app:create_app",
        factory=True,
        host=settings.HTTP_HOST,
        port=settings.HTTP_PORT,
        reload=False,
    )
