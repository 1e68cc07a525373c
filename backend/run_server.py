"""
Run the FXDash backend server.
"""
import os

# Load environment
from dotenv import load_dotenv

backend_dir = os.path.dirname(os.path.abspath(__file__))
load_dotenv(os.path.join(backend_dir, ".env"))

# Run uvicorn
import uvicorn

from fxdash.core.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    print("Starting FXDash Backend Server...")
    print(f"API Docs: http://localhost:{settings.port}/docs")
    print("-" * 50)

    uvicorn.run(
        "fxdash.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
