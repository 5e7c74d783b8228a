# rui/window/webwidget.py
"""
Desktop transport: the runtime page runs in a QWebEngineView of this process.

Scripts go to the page through ``runJavaScript``; the page sends its
messages back through the ``ruiChannel`` object of a QWebChannel.
"""
import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, QSize, Qt, QUrl, Slot
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWebChannel import QWebChannel
from PySide6.QtWebEngineCore import QWebEngineSettings
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import QVBoxLayout, QWidget

from ..bridge import DEFAULT_ANSWER_TIMEOUT, Bridge, QtEventLoopMixin
from ..errors import BridgeClosedError

logger = logging.getLogger(__name__)


class Api(QObject):
    """
    The object the page sees as ``ruiChannel``.

    :param on_message: Called with every message text of the page.
    """

    def __init__(self, on_message: Optional[Callable[[str], None]] = None):
        super().__init__()
        self.on_message = on_message

    @Slot(str)
    def send_message(self, text: str) -> None:
        if self.on_message is None:
            logger.warning("Message before the session was attached: %s", text)
            return
        self.on_message(text)


class WebViewBridge(QtEventLoopMixin, Bridge):
    """Runs scripts in the page of a :class:`WebWindow`."""

    def __init__(self, webview: QWebEngineView, answer_timeout: float = DEFAULT_ANSWER_TIMEOUT,
                 debug: bool = False):
        super().__init__(answer_timeout, debug)
        self._webview: Optional[QWebEngineView] = webview

    def write_message(self, script: str) -> bool:
        if self.closed or self._webview is None:
            raise BridgeClosedError("the window is closed")
        self._webview.page().runJavaScript(script)
        return True

    def remote_addr(self) -> str:
        return "local"

    def close(self) -> None:
        super().close()
        self._webview = None


class DebugWindow(QWebEngineView):
    """A separate window with the developer tools of the page."""

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Debug Window")
        self.resize(800, 600)


class WebWindow(QWidget):
    """
    :param title: Window title.
    :param html_file: The runtime page to load.
    :param api: The channel object registered as ``ruiChannel``.
    :param reload_handler: Called on Ctrl+R.
    """

    def __init__(
        self,
        title: str,
        html_file: Optional[str] = None,
        api: Optional[Api] = None,
        width: int = 800,
        height: int = 600,
        fixed_size: bool = False,
        on_top: bool = False,
        reload_handler: Optional[Callable[[], None]] = None,
    ):
        super().__init__()
        self.setWindowTitle(title)
        if fixed_size:
            self.setFixedSize(QSize(width, height))
        else:
            self.setGeometry(100, 100, width, height)
        if on_top:
            self.setWindowFlags(self.windowFlags() | Qt.WindowStaysOnTopHint)

        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(0, 0, 0, 0)

        self.webview = QWebEngineView(self)
        settings = self.webview.settings()
        settings.setAttribute(QWebEngineSettings.LocalContentCanAccessRemoteUrls, True)
        settings.setAttribute(QWebEngineSettings.LocalContentCanAccessFileUrls, True)
        self.layout.addWidget(self.webview)

        self.channel = QWebChannel()
        if api is not None:
            self.channel.registerObject("ruiChannel", api)
        self.webview.page().setWebChannel(self.channel)

        if html_file:
            self.webview.setUrl(QUrl.fromLocalFile(html_file))
            logger.debug("Page %s loaded", html_file)

        self.debug_window = DebugWindow()
        self.webview.page().setDevToolsPage(self.debug_window.page())
        self.debug_window.hide()

        if reload_handler is not None:
            shortcut = QShortcut(QKeySequence("Ctrl+R"), self)
            shortcut.activated.connect(reload_handler)

    def toggle_debug_window(self) -> None:
        if self.debug_window.isVisible():
            self.debug_window.hide()
        else:
            self.debug_window.show()

    def closeEvent(self, event) -> None:
        self.debug_window.close()
        super().closeEvent(event)
