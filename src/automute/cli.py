"""Command line entry point: ``automute --room-id ITB-1106 ...``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from automute.config import AutoMuteConfig
from automute.exceptions import AutoMuteConfigError, AutoMuteError
from automute.service import AutoMuteService

_logger = logging.getLogger("automute")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="automute",
        description="Keep exactly one display per shared input unmuted in an AV room",
    )
    parser.add_argument("-L", "--log-level", default=None, help="Logging level (debug, info, warning, error)")
    parser.add_argument("--room-id", default=None, help="Room id, e.g. ITB-1106")
    parser.add_argument("--device-id", default=None, help="Id of this control processor, e.g. ITB-1106-CP1")
    parser.add_argument("--hub-address", default=None, help="Address of the event hub")
    parser.add_argument("--av-api", dest="api_address", default=None, help="Address of the AV API")
    parser.add_argument("--db-address", dest="gate_address", default=None, help="Address of the room database")
    parser.add_argument(
        "--controller-pattern",
        default=None,
        help="Only run when the hostname matches this regular expression (e.g. CP1)",
    )
    parser.add_argument(
        "--gate-retry-interval",
        type=float,
        default=None,
        help="Seconds between autoMute re-checks; 0 sleeps forever after the first negative check",
    )
    parser.add_argument(
        "--keep-singleton-mute",
        dest="unmute_singletons",
        action="store_const",
        const=False,
        default=None,
        help="Leave displays that are alone on their input muted as reported",
    )
    parser.add_argument(
        "--refetch-on-resolve",
        action="store_const",
        const=True,
        default=None,
        help="Fetch room state from the AV API before every resolution",
    )
    parser.add_argument(
        "--full-push",
        dest="mute_only_push",
        action="store_const",
        const=False,
        default=None,
        help="Send power and input along with mute state when pushing",
    )
    return parser


async def _run(config: AutoMuteConfig) -> None:
    async with AutoMuteService(config) as service:
        await service.run()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = AutoMuteConfig.from_env(**vars(args))
    except AutoMuteConfigError as exc:
        logging.basicConfig(level=logging.INFO)
        _logger.critical("%s", exc)
        return 2

    level = logging.getLevelName(config.log_level.upper())
    logging.basicConfig(
        level=level if isinstance(level, int) else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config.validate()
    except AutoMuteConfigError as exc:
        _logger.critical("%s", exc)
        return 2

    try:
        asyncio.run(_run(config))
    except KeyboardInterrupt:
        return 0
    except AutoMuteError as exc:
        _logger.critical("Failed to start: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
