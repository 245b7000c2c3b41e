# ------------------------------------------------------------
# Author      : Tyson Limato
# Date        : 2025-7-7
# File Name   : main.py
# Description : Data-parallel sum or factorial over 1 .. n for speedup
#               measurements. Exact results via GMP (gmpy2), parallelism
#               via MPI (mpi4py). The range is cut into chunks that are
#               handed out in waves to the workers; the master computes
#               the last chunk of every wave itself.
#
# Usage       : mpirun -n 6 python main.py 1M 100k
#               mpirun -n 6 python main.py 1k 0 --fact --print
#               (chunksize 0 derives the chunk size from the worker count)
#
# Dependencies:
#       - mpi4py
#       - numpy
#       - gmpy2
#
# Notes:
#   - encoded results are sized per value; anything above
#     --max-message-size aborts the run instead of being truncated
#   - batch measurements + plots: see speedup_bench.py
# ------------------------------------------------------------
import logging
import sys

from config import parse_args
from coordinator import Coordinator, RunReport
from errors import ConfigurationError, ReductionError
from log_setup import setup_logger
from mpiMGR import MPIManager
from worker import WorkerLoop

logger = logging.getLogger("main")


def print_report(report: RunReport, print_result: bool = False):
    """Write the timing summary and the check outcome of rank 0 to stdout."""
    if print_result:
        print(f"Result = {report.result}")
    else:
        print("\ndone")
    print(f"Elapsed time: {report.elapsed:f} secs ")
    print(" by PEs: " + ", ".join(f"PE {rank}: {t:f} secs"
                                  for rank, t in report.rank_times()))

    outcome = report.verification
    if outcome is not None:
        if outcome.ok:
            print("++ Result OK")
        else:
            print("** Result WRONG")
        print(f"Check time ({outcome.method}): {outcome.elapsed:f} secs")


def main(argv=None) -> int:
    mpi_mgr = MPIManager()

    # every rank sees the same argv, so a bad command line fails everywhere
    try:
        config = parse_args(argv)
    except ConfigurationError as exc:
        if mpi_mgr.rank == 0:
            print(f"main.py: {exc}", file=sys.stderr)
        return exc.exit_code

    setup_logger(mpi_mgr.rank, logging.DEBUG if config.debug else logging.INFO)
    mpi_mgr.max_message_size = config.max_message_size

    try:
        if mpi_mgr.rank == 0:
            coordinator = Coordinator(mpi_mgr, config.n, config.chunk_size,
                                      mode=config.mode, check=config.check)
            report = coordinator.run()
            print_report(report, config.print_result)
        else:
            WorkerLoop(mpi_mgr, config.mode).run()
    except ReductionError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        mpi_mgr.abort(exc.exit_code)
        return exc.exit_code
    return 0


if __name__ == "__main__":
    sys.exit(main())
