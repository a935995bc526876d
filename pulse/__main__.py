"""Run the relay with uvicorn: python -m pulse"""
import uvicorn

from pulse.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("pulse.main:app", host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
