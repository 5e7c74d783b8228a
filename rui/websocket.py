# rui/websocket.py
"""WebSocket transport: browsers connect to a QWebSocketServer, one session per socket."""
import logging
from typing import TYPE_CHECKING, Dict, Optional

from PySide6.QtCore import QObject
from PySide6.QtNetwork import QHostAddress
from PySide6.QtWebSockets import QWebSocket, QWebSocketServer

from .bridge import DEFAULT_ANSWER_TIMEOUT, Bridge, QtEventLoopMixin
from .errors import BridgeClosedError

if TYPE_CHECKING:
    from .core import Application
    from .session import Session

logger = logging.getLogger(__name__)


class WebSocketBridge(QtEventLoopMixin, Bridge):
    """Sends scripts as text frames of one client socket."""

    def __init__(self, socket: QWebSocket, answer_timeout: float = DEFAULT_ANSWER_TIMEOUT, debug: bool = False):
        super().__init__(answer_timeout, debug)
        self._socket: Optional[QWebSocket] = socket

    def write_message(self, script: str) -> bool:
        if self.closed or self._socket is None:
            raise BridgeClosedError("the WebSocket is closed")
        sent = self._socket.sendTextMessage(script)
        if sent < len(script.encode("utf-8")):
            logger.error("Only %d bytes of a script were sent to %s", sent, self.remote_addr())
            raise BridgeClosedError("the WebSocket dropped a script")
        return True

    def remote_addr(self) -> str:
        if self._socket is None:
            return ""
        return f"{self._socket.peerAddress().toString()}:{self._socket.peerPort()}"

    def close(self) -> None:
        super().close()
        socket, self._socket = self._socket, None
        if socket is not None:
            socket.close()
            socket.deleteLater()


class SocketServer(QObject):
    """
    Accepts runtime connections and gives every one a session of ``app``.

    :param app: Creates and closes the sessions.
    :param host: Interface to listen on.
    :param port: TCP port; 0 picks a free one.
    """

    def __init__(self, app: "Application", host: str = "127.0.0.1", port: int = 8001, parent: QObject = None):
        super().__init__(parent)
        self.app = app
        self.host = host
        self.port = port
        self._server = QWebSocketServer("rui", QWebSocketServer.SslMode.NonSecureMode, self)
        self._server.newConnection.connect(self._on_new_connection)
        self._sessions: Dict[int, "Session"] = {}

    def listen(self) -> bool:
        if not self._server.listen(QHostAddress(self.host), self.port):
            logger.error("Unable to listen on %s:%d: %s", self.host, self.port, self._server.errorString())
            return False
        self.port = self._server.serverPort()
        logger.info("WebSocket server started on ws://%s:%d", self.host, self.port)
        return True

    def _on_new_connection(self) -> None:
        while self._server.hasPendingConnections():
            socket = self._server.nextPendingConnection()
            config = self.app.config
            bridge = WebSocketBridge(socket, float(config.get("answer_timeout")), bool(config.get("debug")))
            session = self.app.create_session(bridge)
            if session is None:
                bridge.close()
                continue
            self._sessions[session.id] = session
            logger.info("Session %d connected from %s", session.id, bridge.remote_addr())
            socket.textMessageReceived.connect(session.process_message)
            socket.disconnected.connect(lambda session=session: self._on_disconnected(session))
            session.start()

    def _on_disconnected(self, session: "Session") -> None:
        self._sessions.pop(session.id, None)
        self.app.close_session(session)

    def close(self) -> None:
        for session in list(self._sessions.values()):
            self.app.close_session(session)
        self._sessions.clear()
        self._server.close()
