import asyncio
import logging
import sys

from cryptic_chest.app.db import init_models

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    # --reset drops existing tables first (DEV MODE ONLY)
    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    asyncio.run(init_models(drop="--reset" in sys.argv))
    print(">>> Tables Created Successfully!")
