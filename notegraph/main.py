"""Entry point for running the FastAPI application."""

import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()


def main() -> None:
    # PORT=7860 notegraph
    port = int(os.getenv("PORT", "8000"))
    reload = os.getenv("RELOAD", "false").lower() in {"1", "true", "yes"}

    uvicorn.run(
        "notegraph.api.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    main()
