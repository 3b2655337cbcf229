from chatapi.core.config import get_settings
import uvicorn


def main():  # pragma: no cover
    # resolve settings first so a missing variable fails before uvicorn starts
    settings = get_settings()
    uvicorn.run(
        "chatapi.api.main:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":  # pragma: no cover
    main()
