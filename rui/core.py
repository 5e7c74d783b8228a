# rui/core.py
"""
The application: creates a session with its own view tree for every client
and runs the servers (browser mode) or a desktop window.
"""
import logging
import shutil
import signal
import sys
import tempfile
from pathlib import Path
from typing import Callable, Dict, Optional

from PySide6.QtCore import QCoreApplication, QTimer

from .bridge import Bridge
from .config import Config
from .server import AssetServer
from .session import Session
from .theme import Theme
from .view import View
from .websocket import SocketServer

logger = logging.getLogger(__name__)

ASSETS_DIR = Path(__file__).resolve().parent / "assets"

RootViewFactory = Callable[[Session], View]


class Application:
    """
    :param create_root_view: Called once per session to build its view tree.
    :param config: Settings; the shared :class:`rui.config.Config` by default.
    :param theme: Theme of every session.
    """

    def __init__(self, create_root_view: RootViewFactory, config: Optional[Config] = None,
                 theme: Optional[Theme] = None):
        self.create_root_view = create_root_view
        self.config = config or Config()
        self.theme = theme or Theme()
        self.title = self.config.get("title")
        self.sessions: Dict[int, Session] = {}
        self._next_session_id = 1
        self._strings: Dict[str, Dict[str, str]] = {}

    def add_strings(self, language: str, strings: Dict[str, str]) -> None:
        """Translations given to every new session."""
        self._strings.setdefault(language, {}).update(strings)

    # --- sessions ---

    def create_session(self, bridge: Bridge) -> Optional[Session]:
        """
        A new session on ``bridge`` with its root view built.

        :return: None if the root view factory failed.
        """
        session_id = self._next_session_id
        self._next_session_id += 1
        session = Session(session_id, theme=self.theme.copy(), debug=bool(self.config.get("debug")))
        for language, strings in self._strings.items():
            session.add_strings(language, strings)

        try:
            root = self.create_root_view(session)
        except Exception:
            logger.exception("Session %d: unable to create the root view", session_id)
            return None
        if not isinstance(root, View):
            logger.error("Session %d: the root view factory returned %r", session_id, root)
            return None

        session.set_root_view(root)
        session.bridge = bridge
        self.sessions[session_id] = session
        return session

    def close_session(self, session: Session) -> None:
        self.sessions.pop(session.id, None)
        session.close()

    # --- page ---

    def write_web_files(self, web_dir: Path, socket_url: str = "") -> Path:
        """
        Write ``index.html`` and ``runtime.js`` to ``web_dir``.

        :param socket_url: WebSocket address of the runtime; "" for the desktop window channel.
        :return: The path of ``index.html``.
        """
        web_dir.mkdir(parents=True, exist_ok=True)
        template = (ASSETS_DIR / "index.html").read_text(encoding="utf-8")
        page = (template
                .replace("{{title}}", self.title or "")
                .replace("{{socket_url}}", socket_url)
                .replace("{{transport}}", "socket" if socket_url else "channel"))
        index = web_dir / "index.html"
        index.write_text(page, encoding="utf-8")
        shutil.copyfile(ASSETS_DIR / "runtime.js", web_dir / "runtime.js")
        return index

    # --- running ---

    def serve(self, host: Optional[str] = None, http_port: Optional[int] = None,
              socket_port: Optional[int] = None) -> int:
        """Serve browsers until interrupted. Returns the exit code."""
        host = host or self.config.get("host")
        http_port = self.config.get("http_port") if http_port is None else http_port
        socket_port = self.config.get("socket_port") if socket_port is None else socket_port

        qt_app = QCoreApplication.instance() or QCoreApplication(sys.argv)

        socket_server = SocketServer(self, host, socket_port)
        if not socket_server.listen():
            return 1

        web_dir = Path(tempfile.mkdtemp(prefix="rui-"))
        self.write_web_files(web_dir, f"ws://{host}:{socket_server.port}/")
        asset_server = AssetServer(str(web_dir), host, http_port)
        asset_server.start()
        asset_server.ready.wait()
        if asset_server.error is not None:
            socket_server.close()
            return 1

        logger.info("Open http://%s:%d/ in a browser", host, http_port)

        # let Python see Ctrl+C while Qt runs its loop
        signal.signal(signal.SIGINT, lambda *args: qt_app.quit())
        timer = QTimer()
        timer.start(200)
        timer.timeout.connect(lambda: None)

        try:
            return qt_app.exec()
        finally:
            socket_server.close()
            asset_server.stop()
            shutil.rmtree(web_dir, ignore_errors=True)

    def run_window(self, debug: bool = False) -> int:
        """Run one session in a desktop window. Returns the exit code."""
        from PySide6.QtWidgets import QApplication

        from .window.webwidget import Api, WebViewBridge, WebWindow

        qt_app = QApplication.instance() or QApplication(sys.argv)
        web_dir = Path(tempfile.mkdtemp(prefix="rui-"))
        index = self.write_web_files(web_dir)

        api = Api()
        session: Optional[Session] = None

        def reload() -> None:
            if session is not None:
                session.reload()

        window = WebWindow(
            self.title or "",
            html_file=str(index),
            api=api,
            width=int(self.config.get_nested("window.width")),
            height=int(self.config.get_nested("window.height")),
            reload_handler=reload,
        )
        bridge = WebViewBridge(window.webview, float(self.config.get("answer_timeout")),
                               bool(self.config.get("debug")))
        session = self.create_session(bridge)
        if session is None:
            return 1
        api.on_message = session.process_message

        def on_load_finished(ok: bool) -> None:
            if ok:
                session.start()
            else:
                logger.error("Unable to load %s", index)

        window.webview.loadFinished.connect(on_load_finished)
        window.show()
        if debug:
            window.toggle_debug_window()

        try:
            return qt_app.exec()
        finally:
            self.close_session(session)
            shutil.rmtree(web_dir, ignore_errors=True)
