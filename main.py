"""
Jeni Life OS — Entry Point.

Single entry point: `python main.py` serves the chat API with uvicorn.
"""

import logging

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from jeni.app import main

if __name__ == "__main__":
    main()
