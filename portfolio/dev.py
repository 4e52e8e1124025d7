from __future__ import annotations

import argparse
import functools
import http.server
from pathlib import Path

from .build import PREFIX, build_site
from .config import BASE_DIR, SITE_DIR, TEMPLATE_PATH, ConfigError

PORT = 8787


def serve(site_dir: Path, port: int = PORT) -> None:
    handler = functools.partial(http.server.SimpleHTTPRequestHandler, directory=str(site_dir))
    httpd = http.server.ThreadingHTTPServer(("localhost", port), handler)
    url = f"http://localhost:{port}/"
    print(f"{PREFIX} Serving {url} (site dir: {site_dir})")
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        print(f"{PREFIX} Shutting down server.")
    finally:
        httpd.server_close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Build and serve the portfolio locally.")
    parser.add_argument("--once", action="store_true", help="Build once and exit without serving.")
    parser.add_argument("--config", default=str(BASE_DIR), help="Directory or URL that holds config/*.json.")
    parser.add_argument("--template", type=Path, default=TEMPLATE_PATH)
    parser.add_argument("--out", type=Path, default=SITE_DIR)
    parser.add_argument("--port", type=int, default=PORT)
    args = parser.parse_args(argv)

    try:
        build_site(args.config, args.template, args.out)
    except ConfigError as exc:
        print(f"{PREFIX} Error initializing portfolio: {exc}")
        return 1
    print(f"{PREFIX} Build complete. Preview at http://localhost:{args.port}/")
    if args.once:
        return 0
    if not args.out.exists():
        print(f"{PREFIX} {args.out} directory missing after build.")
        return 1
    serve(args.out, args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
