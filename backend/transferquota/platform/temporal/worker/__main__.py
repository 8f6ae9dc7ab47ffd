"""Entry point: python -m transferquota.platform.temporal.worker."""

import asyncio

from . import main

if __name__ == "__main__":
    asyncio.run(main())
