"""
Entry point for running the TikTok OAuth service.

Loads a local .env file (if present) before the application reads its
configuration, then serves the app with uvicorn.
"""

import os

from dotenv import load_dotenv

load_dotenv()

import uvicorn  # noqa: E402

from tiktok_auth.main import app  # noqa: E402


if __name__ == "__main__":
    port = int(os.getenv("PORT", 3000))
    # Access logs are emitted by tiktok_auth.middleware
    uvicorn.run(app, host="0.0.0.0", port=port, access_log=False, log_config=None)
