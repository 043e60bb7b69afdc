import logging
import os
import socket

from filterboard.logging_config import configure_logging
from filterboard.ui.dash_app import create_dash_app

CONFIG_ENV = "FILTERBOARD_CONFIG"
DEFAULT_PORT = 8050

configure_logging()
logger = logging.getLogger("filterboard.app")

# config root holds global.json, charts/ and (by default) ../data/data.csv
config_root = os.getenv(CONFIG_ENV, "config")
app = create_dash_app(config_root)
server = app.server


def find_free_port(start_port: int, attempts: int = 100) -> int:
    """First port in [start_port, start_port + attempts) nobody listens on, else start_port."""
    for port in range(start_port, start_port + attempts):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            if s.connect_ex(("localhost", port)) != 0:
                return port
    return start_port


def main() -> None:
    preferred_port = int(os.getenv("PORT", str(DEFAULT_PORT)))
    port = find_free_port(preferred_port)
    debug = os.getenv("DEBUG", "0") == "1"

    if port != preferred_port:
        logger.warning("Port taken, using next free one", extra={"preferred_port": preferred_port, "port": port})
    logger.info("Starting dashboard", extra={"config_root": config_root, "port": port, "debug": debug})

    app.run(host="0.0.0.0", port=port, debug=debug)


if __name__ == "__main__":
    main()
