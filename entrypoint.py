"""Backend entrypoint; serves the tax pack API with uvicorn on the configured host and port."""
import uvicorn

# Import the app object directly; uvicorn's string-based import fails in frozen bundles
from taxpack.config.settings import get_settings
from taxpack.main import app


def main() -> None:
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
