"""Entry point for running the FastAPI application."""

import os

import uvicorn
from dotenv import load_dotenv

from santra.logging_config import configure_logging

load_dotenv()

if __name__ == "__main__":
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))
    # PORT=8080 python main.py
    port = int(os.getenv("PORT", "3000"))

    uvicorn.run(
        "santra.api.main:app",
        host="0.0.0.0",
        port=port,
        reload=True,
    )
