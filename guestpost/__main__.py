"""Run the marketplace with uvicorn: ``python -m guestpost``."""
import uvicorn

from guestpost.app import create_app
from guestpost.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(create_app(), host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
