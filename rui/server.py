# rui/server.py
"""Static HTTP server for the runtime page, run in a background thread."""
import http.server
import logging
import os
import socketserver
import threading
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class MultiDirectoryRequestHandler(http.server.SimpleHTTPRequestHandler):
    """
    Serves files from several directories.

    - Requests to ``/`` are served from ``base_directory``.
    - Requests to ``/<prefix>/...`` are served from the directory mapped to ``prefix``.
    """
    base_directory: Optional[str] = None
    extra_directories: Dict[str, str] = {}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, directory=self.base_directory, **kwargs)

    def translate_path(self, path: str) -> str:
        path = path.split("?", 1)[0]
        path = path.split("#", 1)[0]

        for prefix, fs_path in self.extra_directories.items():
            url_prefix = f"/{prefix.strip('/')}/"
            if path.startswith(url_prefix):
                return os.path.join(fs_path, path[len(url_prefix):])
        return super().translate_path(path)

    def end_headers(self):
        self.send_header("Access-Control-Allow-Origin", "*")
        self.send_header("Cache-Control", "no-cache")
        super().end_headers()

    def log_message(self, format, *args):
        logger.debug("%s - %s", self.address_string(), format % args)


class AssetServer(threading.Thread):
    """
    :param directory: The directory with ``index.html`` and ``runtime.js``.
    :param host: Interface to listen on.
    :param port: TCP port.
    :param extra_serve_dirs: URL prefix -> directory, e.g. ``{"images": "/path/to/images"}``.
    """

    def __init__(self, directory: str, host: str = "127.0.0.1", port: int = 8000,
                 extra_serve_dirs: Optional[Dict[str, str]] = None):
        super().__init__(daemon=True)
        self.directory = directory
        self.host = host
        self.port = port
        self.extra_serve_dirs = extra_serve_dirs or {}
        self.server: Optional[socketserver.TCPServer] = None
        self.ready = threading.Event()
        self.error: Optional[OSError] = None

    def run(self):
        class Handler(MultiDirectoryRequestHandler):
            base_directory = self.directory
            extra_directories = self.extra_serve_dirs

        try:
            httpd = socketserver.ThreadingTCPServer((self.host, self.port), Handler)
        except OSError as e:
            logger.error("Could not start the asset server on port %d: %s", self.port, e)
            self.error = e
            self.ready.set()
            return

        with httpd:
            self.server = httpd
            logger.info("Asset server started on http://%s:%d", self.host, self.port)
            logger.debug("Serving %s", self.directory)
            self.ready.set()
            httpd.serve_forever()

    def stop(self):
        if self.server:
            self.server.shutdown()
            self.server.server_close()
            logger.info("Asset server stopped")
