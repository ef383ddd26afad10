# server/main.py
from fastmcp import FastMCP
from app.di import build_container
from app.logging import configure_logging
from server.tools.files import register_file_tools

def create_mcp() -> FastMCP:
    """
    Build DI container, create FastMCP host, and register tools.
    Keep the server (protocol) separate from storage logic.
    """
    container = build_container()
    configure_logging(container.settings.LOG_LEVEL)

    mcp = FastMCP("SandboxFiles", version="0.1.0")
    register_file_tools(mcp, container)
    return mcp


if __name__ == "__main__":
    app = create_mcp()
    # stdio transport: client (agent/IDE) launches this process and speaks JSON-RPC on stdin/stdout
    app.run(transport="stdio")
