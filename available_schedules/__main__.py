import uvicorn

from available_schedules.config import get_settings
from available_schedules.observability.logging import configure_logging


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run("available_schedules.main:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
