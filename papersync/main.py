import logging

import uvicorn
from papersync.api.api_run import app
from papersync.utilities.config import APP_HOST, APP_PORT, DEBUG
from papersync.utilities.network import get_local_ip


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.DEBUG if DEBUG else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = APP_HOST
    port = APP_PORT
    local_url = f"http://localhost:{port}"
    local_ip = get_local_ip()
    lan_url = f"http://{local_ip}:{port}"
    # Print a friendly message that points to the URL you can open in a browser
    print(f"Uvicorn running on {local_url} (Press CTRL+C to quit)")
    # Also show the LAN-accessible URL for the phone that uploads scans
    if local_ip not in ("127.0.0.1", "localhost"):
        print(f"Accessible from other devices at: {lan_url}")
    uvicorn.run(app, host=host, port=port)
