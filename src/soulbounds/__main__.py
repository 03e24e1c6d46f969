from __future__ import annotations

import argparse
import time

from .runtime.server import run


def main() -> None:
    p = argparse.ArgumentParser(prog="soulbounds", description="soulbounds: non-transferable identity registry server")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    p.add_argument("--admin-token", default=None, help="overrides SOULBOUNDS_ADMIN_TOKEN")
    p.add_argument("--log-level", default=None, help="overrides SOULBOUNDS_LOG_LEVEL")
    p.add_argument("--open-browser", action="store_true", help="open the interactive API docs")
    args = p.parse_args()

    srv = run(
        host=args.host,
        port=args.port,
        open_browser=args.open_browser,
        log_level=args.log_level,
        admin_token=args.admin_token,
        new_server=True,
    )
    print(srv.url)

    # Block forever (so it behaves like a normal CLI server)
    try:
        while True:
            time.sleep(3600)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
