"""Run the demo chat server.

    python -m mnexium.demo

Reads MNX_KEY and OPENAI_KEY (or their MNEXIUM_* forms) from the
environment or a `.env.local` file in the working directory.
"""

import uvicorn
from dotenv import load_dotenv

from mnexium.config import get_settings


def main() -> None:
    load_dotenv(".env.local")
    load_dotenv()

    settings = get_settings()
    uvicorn.run(
        "mnexium.demo.app:create_app",
        factory=True,
        host=settings.demo.host,
        port=settings.demo.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
