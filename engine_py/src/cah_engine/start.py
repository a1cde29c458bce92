#!/usr/bin/env python3
"""Startup script for the Cards Against Humanity lobby backend"""

import uvicorn

from .config import Settings


def main():
    settings = Settings.from_env()
    
    print(f"Starting CAH lobby backend on {settings.host}:{settings.port}")
    print(f"Health check available at: http://{settings.host}:{settings.port}/health")
    print(f"WebSocket endpoint: ws://{settings.host}:{settings.port}/ws")
    
    uvicorn.run(
        "cah_engine.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    main()
