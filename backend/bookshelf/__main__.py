"""Run the API with uvicorn: python -m bookshelf [--host HOST] [--port PORT]"""

import argparse

import uvicorn

from bookshelf.config import settings


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="bookshelf",
        description="Run 'uvicorn' ASGI server to serve the Bookshelf REST API",
    )
    parser.add_argument("--host", default=settings.backend_host, help="listen address")
    parser.add_argument("--port", type=int, default=settings.backend_port, help="listen port")
    args = parser.parse_args()

    uvicorn.run(
        "bookshelf.main:app",
        host=args.host,
        port=args.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
