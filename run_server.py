"""Entry point for running the FastAPI application with Uvicorn."""
from __future__ import annotations

import os

import uvicorn


def main() -> None:
  port = int(os.getenv("PORT", os.getenv("SOCIAL_SERVER_PORT", "1998")))
  reload = os.getenv("UVICORN_RELOAD", "false").lower() == "true"
  uvicorn.run("socialfeed.main:create_app", factory=True, host="0.0.0.0", port=port, reload=reload)


if __name__ == "__main__":
  main()
