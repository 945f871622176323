# MCP bridge between LLM clients and the Cardinal analytics backend
# Main module initialization

__version__ = "0.1.0"


def main() -> None:
    """CLI entry point: serve the MCP bridge over stdio."""
    import asyncio
    import logging
    import sys

    from .config import settings
    from .server import run_stdio

    # stdout carries the MCP channel; logs go to stderr
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    logger = logging.getLogger(__name__)

    try:
        asyncio.run(run_stdio(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    except Exception as e:
        logger.error(f"Failed to start MCP server: {e}")
        raise SystemExit(1)
