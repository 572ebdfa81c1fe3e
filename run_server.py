#!/usr/bin/env python3
"""
Development server launcher for the IPFS pin relay.

This script starts the FastAPI server with settings from config/config.yaml
($PIN_RELAY_CONFIG overrides the path, $PORT overrides the port).
For production, you'd use a proper ASGI server deployment.
"""

import logging
import uvicorn
import sys
from pathlib import Path

# Add the project root to the Python path so `src.*` imports work
project_root = Path(__file__).parent
src_path = project_root / "src"
sys.path.insert(0, str(project_root))

from src.pinning.manager import PinningManager, resolve_config_path

if __name__ == "__main__":
    settings = PinningManager(resolve_config_path()).server_settings
    port = settings["port"]

    logging.basicConfig(
        level=getattr(logging, str(settings["log_level"]).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    logger = logging.getLogger("run_server")
    logger.info(f"Server running on http://localhost:{port}")
    logger.info(f"API documentation at: http://localhost:{port}/api-docs")

    uvicorn.run(
        "src.api.main:app",
        host=settings["host"],
        port=port,
        reload=True,     # Auto-reload on code changes (development only)
        reload_dirs=[str(src_path)],  # Only watch src directory
        log_level=str(settings["log_level"]).lower()
    )
