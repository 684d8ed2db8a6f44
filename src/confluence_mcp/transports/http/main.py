from __future__ import annotations

import uvicorn

from confluence_mcp.core.config import ConfluenceSettings
from confluence_mcp.core.logging import setup_logging

from .app import build_http_app
from .config import HttpConfig


def main() -> None:
    settings = ConfluenceSettings.from_env()
    setup_logging(settings.log_level)
    cfg = HttpConfig.from_env()
    app = build_http_app(cfg, settings)
    uvicorn.run(app, host=cfg.host, port=cfg.port, log_config=None)


if __name__ == "__main__":
    main()
