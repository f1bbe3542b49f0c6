"""
Entry point for the fracture service.

Running this script with ``python run.py`` starts the FastAPI server
defined in ``backend/fracture/main.py``.  The backend directory is put
on the Python path so that ``fracture`` can be imported as a package.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import uvicorn

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def main() -> None:
    """Run the Uvicorn server hosting the fracture service."""
    backend_dir = Path(__file__).resolve().parent / "backend"
    if str(backend_dir) not in sys.path:
        sys.path.append(str(backend_dir))

    # Imported inside main() so sys.path is only modified when serving.
    from fracture.config import get_settings  # type: ignore
    from fracture.main import app  # type: ignore

    if get_settings().debug:
        logging.getLogger().setLevel(logging.DEBUG)

    uvicorn.run(
        app,
        host=os.getenv("FRACTURE_HOST", "0.0.0.0"),
        port=int(os.getenv("FRACTURE_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
