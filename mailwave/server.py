"""
MailWave server entry point.

Run with:
    mailwave
    python -m mailwave.server

Visit:
    http://localhost:5000             - Homepage
    http://localhost:5000/api/health  - Health check

SIGTERM/SIGINT stop accepting connections, wait for in-flight requests to
finish and close the store before exiting.
"""

import logging
import signal
import sys
import threading

from werkzeug.serving import make_server

from . import create_app
from .core import StoreError

logger = logging.getLogger(__name__)


class GracefulServer:
    """Threaded WSGI server that drains requests and closes the store on shutdown"""

    def __init__(self, app, host, port):
        self.app = app
        self.quiet = app.config.get('ENVIRONMENT') == 'test'
        self.server = make_server(host, port, app, threaded=True)
        # Track request threads so server_close() can join them
        self.server.daemon_threads = False
        self.server.block_on_close = True
        self._stopping = threading.Event()

    def request_shutdown(self, signum=None, frame=None):
        """Signal handler: stop serve_forever() from another thread"""
        if self._stopping.is_set():
            return
        self._stopping.set()
        if signum is not None:
            logger.info(f"{signal.Signals(signum).name} signal received: closing HTTP server")
        # shutdown() blocks until serve_forever() returns, so it cannot run on
        # the thread that is serving
        threading.Thread(target=self.server.shutdown, daemon=True).start()

    def install_signal_handlers(self):
        signal.signal(signal.SIGTERM, self.request_shutdown)
        signal.signal(signal.SIGINT, self.request_shutdown)

    def serve(self):
        if not self.quiet:
            logger.info(f"Server running on port {self.server.server_port}")
        try:
            self.server.serve_forever()
        finally:
            self.server.server_close()
            logger.info("HTTP server closed")
            self.app.extensions['mailwave'].close()


def main():
    app = create_app()
    store = app.extensions['mailwave'].store

    try:
        store.ping()
        store.ensure_indexes()
    except StoreError as e:
        logger.error(f"Document store connection error: {e.message}")
        sys.exit(1)

    if app.config['ENVIRONMENT'] != 'test':
        logger.info("Document store connected successfully")

    server = GracefulServer(app, app.config['HOST'], app.config['PORT'])
    server.install_signal_handlers()
    server.serve()


if __name__ == '__main__':
    main()
