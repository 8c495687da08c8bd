import uvicorn

from quakewatch.core.config import get_settings


def run() -> None:
    settings = get_settings()
    uvicorn.run("quakewatch.main:app", host=settings.app_host, port=settings.app_port)


if __name__ == "__main__":
    run()
