"""Launch the waypoint planner FastAPI server."""

import sys

import uvicorn
from loguru import logger

from waypoint_planner.config import settings


def main():
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level.upper())
    uvicorn.run("waypoint_planner.server:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
