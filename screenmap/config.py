"""Infrastructure configuration: single source of truth for env vars."""

import os

# Server binding: used by entrypoint / uvicorn
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))

# CORS origins for the HTTP front-end (comma-separated)
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")

# Figma REST API: Personal Access Token for design file access
FIGMA_TOKEN = os.getenv("FIGMA_TOKEN", "")

# Local directory for downloaded image assets
ASSETS_DIR = os.getenv("ASSETS_DIR", os.path.join("output", "assets"))
