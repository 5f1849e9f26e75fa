"""ASGI entrypoint for the identity service (``uvicorn servicehub.main:app``)."""

import os

from .core.app_factory import create_application

app = create_application()

__all__ = ("app",)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "servicehub.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
    )
