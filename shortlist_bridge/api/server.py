"""Run the bridge with uvicorn."""

import argparse

import uvicorn
from dotenv import load_dotenv

from shortlist_bridge.api.app import create_app
from shortlist_bridge.logging_setup import configure_logging
from shortlist_bridge.models.config import BridgeConfig


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Shortlist bridge API server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args(argv)

    load_dotenv()
    config = BridgeConfig.from_env()
    configure_logging(config.log_level)

    app = create_app(config=config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
