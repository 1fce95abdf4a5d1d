import uvicorn

from task_service.config import Settings
from task_service.logging_setup import setup_logging
from task_service.main import create_app


def main() -> None:
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    app = create_app(settings)
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_config=None, access_log=False)


if __name__ == "__main__":
    main()
