"""Entry point for Todo MCP Server."""

from __future__ import annotations

import logging
import os
import sys

from dotenv import load_dotenv

from todo_mcp.config import ORACLE_BACKENDS, get_oracle_backend


def configure_logging() -> None:
    """Configure logging to stderr (STDIO-safe).

    Sends all logs to stderr so they don't interfere with MCP's
    STDIO transport which uses stdout for JSON-RPC messages.

    Respects LOG_LEVEL env var (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = logging.getLevelNamesMapping().get(log_level_str, logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    # Reduce noise from the OpenAI client
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)


def validate_environment() -> bool:
    """Validate oracle configuration.

    Returns:
        True if the configuration is usable, False otherwise.
    """
    logger = logging.getLogger(__name__)

    backend = get_oracle_backend()
    if backend not in ORACLE_BACKENDS:
        logger.error(
            "ORACLE_BACKEND must be one of %s, got %r",
            ", ".join(ORACLE_BACKENDS),
            backend,
        )
        return False

    if backend == "llm" and not os.getenv("OPENAI_API_KEY"):
        logger.error("Missing required environment variable: OPENAI_API_KEY")
        return False

    timeout = os.getenv("ORACLE_TIMEOUT_MS")
    if timeout is not None:
        try:
            timeout_ms = int(timeout)
        except ValueError:
            logger.error("ORACLE_TIMEOUT_MS must be an integer")
            return False
        if timeout_ms <= 0:
            logger.error("ORACLE_TIMEOUT_MS must be positive")
            return False

    return True


def main() -> None:
    """Main entry point.

    Loads environment, validates configuration, and starts the MCP server
    with the appropriate transport (stdio or http).
    """
    # Load .env file if present
    load_dotenv()

    # Configure logging first
    configure_logging()
    logger = logging.getLogger(__name__)

    if not validate_environment():
        logger.error("Environment validation failed. Exiting.")
        sys.exit(1)

    # Import server after environment is validated
    from todo_mcp.server import mcp

    transport = os.getenv("TRANSPORT", "stdio").lower()

    match transport:
        case "sse" | "http":
            host = os.getenv("HOST", "0.0.0.0")
            port = int(os.getenv("PORT", "3000"))
            logger.info(
                "Starting Todo MCP Server with SSE transport on %s:%d", host, port
            )
            import uvicorn

            uvicorn.run(mcp.sse_app(), host=host, port=port, log_level="info")
        case "streamable-http":
            logger.info("Starting Todo MCP Server with streamable-http transport")
            mcp.run(transport="streamable-http")
        case _:
            logger.info("Starting Todo MCP Server with STDIO transport")
            mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
