"""Protean Engine runner for the Shipment domain.

Starts the Engine that processes events asynchronously when the domain is
configured with ``event_processing = "async"`` (projectors and the outbox
run here instead of inside the request's unit of work).

Usage:
    python src/server.py
    python src/server.py --test-mode   # Drain pending messages and exit
"""

import argparse
import asyncio

from protean.server.engine import Engine

from shipment.utils.logging import get_logger

logger = get_logger(__name__)


async def run(test_mode: bool = False):
    from shipment.domain import shipment

    shipment.init()
    logger.info("Starting shipment engine", test_mode=test_mode)
    engine = Engine(shipment, test_mode=test_mode)
    await engine.run()


def main():
    parser = argparse.ArgumentParser(description="Shipment Engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process pending messages once and exit",
    )
    args = parser.parse_args()

    asyncio.run(run(args.test_mode))


if __name__ == "__main__":
    main()
