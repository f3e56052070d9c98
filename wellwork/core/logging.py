"""Logging de WellWork: servidor (uvicorn) y cliente offline con el mismo formato."""
import logging


def setup_logging(level: str = "INFO") -> None:
    lvl = getattr(logging, (level or "INFO").upper(), logging.INFO)
    logging.basicConfig(level=lvl, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "wellwork"):
        logging.getLogger(name).setLevel(lvl)
