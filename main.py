#!/usr/bin/env python3
"""
swagger-injector -- Serve interactive documentation for a Swagger/OpenAPI file.

Usage:
  python main.py swagger.json
  python main.py swagger.json --prefix /api --port 9000
  python main.py swagger.json --key token --value s3cret
  python main.py swagger.json --key X-Docs-Token --source header
  python main.py swagger.json --css theme.css --dist ./dist

Browse to http://127.0.0.1:8000/swagger (or <prefix>/swagger). With --key,
append ?token=s3cret once; the browser keeps a session cookie afterwards.

Environment variables:
  SECRET_KEY   Signs documentation session cookies. Required unless --debug.
  Any other Settings field (see core/config.py) may be set the same way;
  command line flags win.
"""

import argparse
import sys
from typing import Optional

import uvicorn

from api.main import create_app
from core.config import Settings
from core.errors import ConfigurationError
from core.models import CredentialSource


def build_settings(args: argparse.Namespace) -> Settings:
    """Overlay command line flags on environment settings."""
    overrides = {"schema_path": args.schema}
    if args.prefix is not None:
        overrides["docs_prefix"] = args.prefix
    if args.key is not None:
        overrides["auth_key"] = args.key
    if args.value is not None:
        overrides["auth_value"] = args.value
    if args.source:
        overrides["auth_sources"] = args.source
    if args.css is not None:
        overrides["css"] = args.css
    if args.dist is not None:
        overrides["dist"] = args.dist
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.debug:
        overrides["debug"] = True
    return Settings(**overrides)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Serve Swagger UI for a schema file, optionally behind a key/value credential.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("schema", help="Path to the swagger/OpenAPI JSON file")
    parser.add_argument("--prefix", help="Prefix applied to all documentation routes (default: none)")
    parser.add_argument("--key", help="Credential field name required to view the docs")
    parser.add_argument("--value", help="Credential value required for --key")
    parser.add_argument(
        "--source",
        action="append",
        choices=[s.value for s in CredentialSource],
        help="Accepted credential source; repeat for several (default: query, body)",
    )
    parser.add_argument("--css", help="Custom stylesheet: a .css file path or literal css")
    parser.add_argument("--dist", help="Directory holding the Swagger UI files")
    parser.add_argument("--host", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, help="Bind port (default: 8000)")
    parser.add_argument("--debug", action="store_true", help="Development mode: no file caching, generated SECRET_KEY")

    args = parser.parse_args(argv)

    try:
        settings = build_settings(args)
        app = create_app(settings)
    except (ConfigurationError, ValueError) as e:
        print(f"  [!] {e}", file=sys.stderr)
        return 1

    uvicorn.run(app, host=settings.host, port=settings.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
