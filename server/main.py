# =============================================================================
# Camera Vision Analyzer - Relay Server Entry Point
# =============================================================================
# CLI entry point for starting the FastAPI relay that forwards captured
# frames to the hosted vision model.
# =============================================================================

import argparse
import logging

import uvicorn

from config import get_config


def main():
    """Parse CLI arguments, apply overrides, and start the server."""
    parser = argparse.ArgumentParser(
        description="Camera Vision Analyzer — Relay Server",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--host", type=str, default=None, help="Server bind address")
    parser.add_argument("--port", type=int, default=None, help="Server bind port")
    parser.add_argument(
        "--provider", type=str, default=None,
        choices=["gateway", "openai", "responses"],
        help="Upstream inference provider",
    )
    parser.add_argument("--model", type=str, default=None, help="Upstream model identifier")
    parser.add_argument(
        "--allow-origin", action="append", default=None,
        help="External origin allowed to call the API (repeatable, '*' for any)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = get_config()

    if args.host is not None:
        config.server_host = args.host
    if args.port is not None:
        config.server_port = args.port
    if args.provider is not None:
        config.provider = args.provider
    if args.model is not None:
        config.model = args.model
    if args.allow_origin is not None:
        config.allowed_origins = args.allow_origin

    config.relay_url = f"http://{config.server_host}:{config.server_port}"

    print("\n" + "=" * 60)
    print("  Camera Vision Analyzer — Relay Server")
    print("=" * 60)
    print(f"  Provider   : {config.provider}")
    print(f"  Model      : {config.model or '(provider default)'}")
    print(f"  Credential : ${config.api_key_env}")
    print(f"  Timeout    : {config.request_timeout_seconds}s")
    print(f"  Origins    : {', '.join(config.allowed_origins) or '(same-origin only)'}")
    print(f"  Listening  : {config.server_host}:{config.server_port}")
    print("=" * 60 + "\n")

    uvicorn.run(
        "server.app:app",
        host=config.server_host,
        port=config.server_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
