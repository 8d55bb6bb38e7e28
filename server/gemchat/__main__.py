import uvicorn

from gemchat.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("gemchat.main:app", host="0.0.0.0", port=settings.server_port)


if __name__ == "__main__":
    main()
