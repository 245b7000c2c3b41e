# Author      : Tyson Limato
# Date        : 2025-7-6
# File Name   : log_setup.py
import logging
import sys


def setup_logger(rank: int, level: int = logging.INFO, stream=None, force: bool = True):
    """
    Configure root logging for one process of the MPI group.

    Diagnostics go to stderr (results are printed to stdout), each line
    tagged with the rank so the interleaved output of `mpirun` stays
    readable. Safe to call once at process start.
    """
    root = logging.getLogger()
    if force:
        for h in list(root.handlers):
            root.removeHandler(h)

    root.setLevel(level)

    fmt = logging.Formatter(
        f"%(asctime)s [rank {rank}] %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(fmt)
    root.addHandler(handler)
    return root
