"""FastAPI main application for the Thirteen lobby backend"""

import logging
import os
from typing import Optional

from fastapi import FastAPI, HTTPException, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .engine import LobbyEngine
from .serialization import get_public_lobby_info
from .ws.server import LobbyWebSocketServer

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(engine: Optional[LobbyEngine] = None) -> FastAPI:
    server = LobbyWebSocketServer(engine)

    app = FastAPI(title="Thirteen Lobby API", version=__version__)
    app.state.lobby_server = server

    origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        return {"message": "Thirteen Lobby API", "version": __version__}

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "lobbies": len(server.engine.registry),
            "connections": server.engine.registry.connection_count,
        }

    @app.get("/lobbies/{code}")
    async def lobby_info(code: str):
        session = server.engine.get_lobby(code)
        if session is None:
            raise HTTPException(status_code=404, detail="Lobby not found")
        return get_public_lobby_info(session, server.engine.rules.max_players)

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await server.handle_websocket(websocket)

    return app


app = create_app()
