# server/tools/files.py
import logging

from pydantic import BaseModel, Field
from fastmcp import FastMCP

from app.di import Container
from app.logging import log_operation
from app.validation import validate_data, validate_path

logger = logging.getLogger(__name__)


class FileWriteIn(BaseModel):
    path: str = Field(..., description="Logical path under storage root, e.g. /notes/today.txt")
    data: str = Field(..., description="UTF-8 text content to write")


class FilePathIn(BaseModel):
    path: str = Field(..., description="Logical path under storage root, e.g. /notes/today.txt")


class DirStatsIn(BaseModel):
    path: str = Field("/", description="Logical directory under storage root")


def register_file_tools(mcp: FastMCP, container: Container):
    """
    Very thin tool adapters:
    - validate inputs (Pydantic + path/data validation)
    - call the services (business logic + confinement)
    - return the result
    """
    store = container.file_store
    resolver = container.resolver
    suffix = container.settings.FILE_SUFFIX

    @mcp.tool(name="file_write", description="Create or overwrite a text file under storage root")
    def file_write(input: FileWriteIn) -> str:
        log_operation(logger, "file_write", input.model_dump())
        vp = validate_path(input.path, suffix)
        vd = validate_data(input.data)
        store.create(resolver.resolve_file(vp), vd.data)
        return "OK"

    @mcp.tool(name="file_read", description="Read a text file under storage root")
    def file_read(input: FilePathIn) -> str:
        log_operation(logger, "file_read", input.model_dump())
        vp = validate_path(input.path, suffix)
        return store.read(resolver.resolve_file(vp))

    @mcp.tool(name="file_delete", description="Delete a text file under storage root")
    def file_delete(input: FilePathIn) -> str:
        log_operation(logger, "file_delete", input.model_dump())
        vp = validate_path(input.path, suffix)
        store.delete(resolver.resolve_file(vp))
        return "OK"

    @mcp.tool(name="dir_stats", description="Lexical statistics for the files of a directory")
    def dir_stats(input: DirStatsIn) -> dict:
        log_operation(logger, "dir_stats", input.model_dump())
        vp = validate_path(input.path)
        return container.stats_engine.get_stats(vp).to_dict()
