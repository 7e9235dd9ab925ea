from __future__ import annotations
import argparse
import sys
from ..config import SimConfig
from ..errors import CsimError, ConfigurationError
from ..runtime.simulator import run as run_sim
from ..trace.parser import read_trace
from ..trace.record import Operation
from ..utils.logging import get_logger
from ..utils.reporting import generate_report

log = get_logger("csim")


def cmd_run(args):
    """Handles the 'run' command."""
    # Create simulator config from args
    config = SimConfig.from_args(args)
    geometry = config.validate()

    log.info(f"Set index bits: {geometry.index_bits}")
    log.info(f"Block bits: {geometry.offset_bits}")
    log.info(f"Lines per set: {geometry.associativity}")
    log.info(f"Trace file: {config.trace_file}")

    # 1. Open the trace; I/O errors surface before any record is processed
    records = read_trace(config.trace_file)

    # 2. Run simulation
    timeline, stats = run_sim(records, geometry, verbose=config.verbose,
                              keep_timeline=bool(config.report_dir))

    # 3. Report
    generate_report(timeline, geometry, stats, config)
    return 0


def cmd_check(args):
    """Handles the 'check' command."""
    counts = {op: 0 for op in Operation}
    for record in read_trace(args.trace_file):
        counts[record.operation] += 1
    print(f"[OK] {args.trace_file}: {counts[Operation.LOAD]} loads, "
          f"{counts[Operation.STORE]} stores")
    return 0


def build_parser():
    p = argparse.ArgumentParser(
        prog="csim",
        description="Trace-driven set-associative cache simulator",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # --- Run Command ---
    pr = sub.add_parser("run", help="Replay a trace against a cache",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)

    # Config file
    pr.add_argument("-c", "--config", type=str, default=None,
                    help="Path to YAML config file to override defaults")

    # Geometry (set default=None to allow override from YAML)
    pr.add_argument("-s", type=int, default=None, dest="set_bits",
                    help="Number of set index bits (there are 2**s sets)")
    pr.add_argument("-E", type=int, default=None, dest="lines_per_set",
                    help="Number of lines per set (associativity)")
    pr.add_argument("-b", type=int, default=None, dest="block_bits",
                    help="Number of block bits (there are 2**b bytes per block)")
    pr.add_argument("-t", type=str, default=None, dest="trace_file",
                    help="File name of the memory trace to process")
    pr.add_argument("-v", action="store_true", default=None, dest="verbose",
                    help="Verbose mode: report effects of each memory operation")
    pr.add_argument("--report", type=str, default=None, dest="report_dir",
                    help="Directory to save report.json and report.html")
    pr.set_defaults(func=cmd_run)

    # --- Check Command ---
    pc = sub.add_parser("check", help="Validate a trace file without simulating",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    pc.add_argument("-t", type=str, required=True, dest="trace_file",
                    help="File name of the memory trace to validate")
    pc.set_defaults(func=cmd_check)

    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except CsimError as e:
        log.error(f"{e.category}: {e}")
        if isinstance(e, ConfigurationError):
            parser.print_usage(sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
