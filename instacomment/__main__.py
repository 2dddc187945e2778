import uvicorn

from .config import get_settings
from .main import create_app


def main() -> None:
    settings = get_settings()
    app = create_app(settings)
    logging_level = settings.log_level.lower()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=logging_level)


if __name__ == "__main__":
    main()
