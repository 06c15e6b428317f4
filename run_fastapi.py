"""
Main entry point for the chat server.

Usage:
    python run_fastapi.py

Or with uvicorn directly:
    uvicorn pairchat.fastapi_app:app --host 0.0.0.0 --port 3000
"""

import os
import sys
import io

# Set UTF-8 encoding for stdout/stderr to handle emoji on Windows consoles
if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(
        sys.stdout.buffer, encoding="utf-8", errors="replace", line_buffering=True
    )
    sys.stderr = io.TextIOWrapper(
        sys.stderr.buffer, encoding="utf-8", errors="replace", line_buffering=True
    )

os.environ["PYTHONIOENCODING"] = "utf-8"

from dotenv import load_dotenv

load_dotenv()

import uvicorn

if __name__ == "__main__":
    env = os.getenv("APP_ENV", "development")
    debug = env == "development"
    port = int(os.getenv("PORT", 3000))
    host = os.getenv("HOST", "0.0.0.0")

    print(f"Starting chat server in {env} mode on http://{host}:{port}")

    # lifespan="on": a failed database startup aborts with a non-zero exit
    uvicorn.run(
        "pairchat.fastapi_app:app",
        host=host,
        port=port,
        reload=debug,
        lifespan="on",
        log_level="info" if debug else "warning",
    )
