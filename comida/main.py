import logging
import socket
from typing import Optional

import uvicorn
from comida.api.api_run import app
from comida.utilities.config import APP_HOST, APP_PORT, DEBUG

LOOPBACK_HOSTS = ("127.0.0.1", "localhost", "::1")
WILDCARD_HOSTS = ("0.0.0.0", "::", "")


def lan_address(host: str = APP_HOST) -> Optional[str]:
    """Address other devices in the house can use to reach the app, or None when it only listens locally.

    For a wildcard bind the OS is asked which interface routes outwards; the UDP
    connect sends nothing.
    """
    if host in LOOPBACK_HOSTS:
        return None
    if host not in WILDCARD_HOSTS:
        return host
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as udp:
        try:
            udp.connect(("192.0.2.1", 80))
            address = str(udp.getsockname()[0])
        except OSError:
            return None
    return None if address.startswith("127.") else address


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.DEBUG if DEBUG else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print(f"Uvicorn running on http://localhost:{APP_PORT} (Press CTRL+C to quit)")
    address = lan_address()
    if address:
        print(f"Accessible from other devices at: http://{address}:{APP_PORT}")
    uvicorn.run(app, host=APP_HOST, port=APP_PORT)
