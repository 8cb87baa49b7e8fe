from __future__ import annotations

from typing import Optional
from urllib.parse import urlsplit, urlunsplit

import typer
import uvicorn

from media_assets.app import get_settings, setup_logging

app = typer.Typer(no_args_is_help=True, add_completion=False)

_SECRET_FIELDS = {"aws_secret_access_key", "aws_access_key_id"}


def _mask_uri(uri: str) -> str:
    parts = urlsplit(uri)
    if not parts.password:
        return uri
    netloc = parts.netloc.replace(f":{parts.password}@", ":****@", 1)
    return urlunsplit(parts._replace(netloc=netloc))


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address; defaults to HOST"),
    port: Optional[int] = typer.Option(None, help="Bind port; defaults to PORT"),
    reload: bool = typer.Option(False, help="Reload on code changes (development only)"),
) -> None:
    """Run the asset API under uvicorn."""
    settings = get_settings()
    setup_logging(settings)
    uvicorn.run(
        "media_assets.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_config=None,  # keep our dictConfig
    )


@app.command("config")
def show_config() -> None:
    """Print the effective settings with credentials masked."""
    settings = get_settings()
    for name, value in settings.model_dump().items():
        if name in _SECRET_FIELDS and value:
            value = "****"
        elif name == "mongo_uri":
            value = _mask_uri(value)
        typer.echo(f"{name}={value}")


if __name__ == "__main__":
    app()
