"""FastAPI main application for the Cards Against Humanity lobby backend"""

import logging

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .ws.server import LobbyManager

settings = Settings.from_env()

# Configure logging
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

lobby_manager = LobbyManager(settings)

app = FastAPI(title="Cards Against Humanity Lobby API", version="1.0.0")

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    return {"message": "Cards Against Humanity Lobby API", "version": "1.0.0"}


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "packs": len(lobby_manager.content.catalog),
        "lobbies": len(lobby_manager.lobbies),
    }


@app.get("/lobbies")
async def list_lobbies():
    return lobby_manager.summary()


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    await lobby_manager.handle_websocket(websocket)
