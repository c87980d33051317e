import uvicorn

from notes_summarizer.config import get_settings
from notes_summarizer.main import app, configure_logging


def main() -> None:
    settings = get_settings()
    configure_logging(settings)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
