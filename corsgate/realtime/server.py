from __future__ import annotations

from typing import Any, Dict, Optional

import socketio
from socketio.exceptions import ConnectionRefusedError

from corsgate.cors.policy import PolicyEngine
from corsgate.utils.logging import logger

ORIGIN_NOT_ALLOWED = "origin not allowed"


class HandshakeGuard:
    """Maps the policy decision onto the handshake's error-or-None convention."""

    def __init__(self, engine: PolicyEngine) -> None:
        self.engine = engine

    def handshake_error(self, origin: Optional[str]) -> Optional[str]:
        if self.engine.is_allowed(origin):
            return None
        return ORIGIN_NOT_ALLOWED

    def __call__(self, origin: Optional[str], environ: Optional[Dict[str, Any]] = None) -> bool:
        # engine.io cors_allowed_origins callable
        return self.handshake_error(origin) is None


def create_sio(engine: PolicyEngine, cors_credentials: bool = True) -> socketio.AsyncServer:
    guard = HandshakeGuard(engine)
    sio = socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=guard,
        cors_credentials=cors_credentials,
        logger=False,
        engineio_logger=False,
    )

    # engine.io refuses a present, denied Origin first (400 "Not an accepted
    # origin."), so this check only answers clients engine.io let through
    @sio.event
    async def connect(sid: str, environ: Dict[str, Any], auth: Any = None):
        error = guard.handshake_error(environ.get("HTTP_ORIGIN"))
        if error:
            raise ConnectionRefusedError(error)
        logger.info(f"socket connected sid={sid}")

    @sio.event
    async def disconnect(sid: str, *args: Any):
        logger.info(f"socket disconnected sid={sid}")

    return sio
