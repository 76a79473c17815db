"""Project root entry point for launching the HTTP key API."""

from __future__ import annotations

import sys
from pathlib import Path


def _bootstrap_path() -> None:
    """Ensure the package is importable when running from project root."""
    project_root = Path(__file__).resolve().parent
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))


def main():
    _bootstrap_path()
    from lokalise_mcp.config import load_config
    from lokalise_mcp.logger import configure_logging
    from lokalise_mcp.web import create_app

    config = load_config()
    configure_logging(config)
    app = create_app(config)
    app.run(host="0.0.0.0", port=config.port)


if __name__ == "__main__":
    main()
