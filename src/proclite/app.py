"""proclite - scrape endpoint and process entry point."""

import logging
import sys

from flask import Flask, Response
from werkzeug.serving import make_server

from proclite import __version__
from proclite.collector import Collector
from proclite.config import ConfigError, ExporterConfig
from proclite.monitor import RefreshLoop
from proclite.readers import build_reader
from proclite.store import SnapshotStore

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def create_app(store: SnapshotStore) -> Flask:
    """Create the Flask app serving the store's current document."""
    app = Flask(__name__)

    @app.route("/metrics")
    def metrics() -> Response:
        return Response(store.read(), status=200, content_type="text/plain")

    return app


def serve(app: Flask, port: int, host: str = "0.0.0.0") -> None:
    """
    Serve app until interrupted, one thread per request.

    A port that cannot be bound is fatal and exits with status 1.
    """
    try:
        server = make_server(host, port, app, threaded=True)
    except OSError as exc:
        logger.critical("Cannot listen on %s:%d: %s", host, port, exc)
        raise SystemExit(1) from exc

    logger.info("Starting metrics server on :%d", port)
    try:
        server.serve_forever()
    finally:
        server.server_close()


def main() -> None:
    """Entry point for the proclite exporter."""
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, stream=sys.stderr)

    try:
        config = ExporterConfig.from_env()
    except ConfigError as exc:
        logger.critical("Invalid configuration: %s", exc)
        raise SystemExit(2) from exc

    logging.getLogger().setLevel(config.log_level)
    logger.info(
        "proclite %s reading %s with the %s reader every %.1fs",
        __version__,
        config.proc_mount,
        config.reader,
        config.update_interval,
    )

    store = SnapshotStore()
    collector = Collector(
        config.proc_mount,
        build_reader(config),
        max_workers=config.max_workers,
    )
    refresh = RefreshLoop(collector, store, interval=config.update_interval)

    refresh.start()
    try:
        serve(create_app(store), config.port)
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        refresh.stop()


if __name__ == "__main__":
    main()
