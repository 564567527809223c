"""
Command-line interface for tiny-qsim.

Usage:
    tiny-qsim run bell --shots 1000
    tiny-qsim run ghz --qubits 4 --seed 7
    tiny-qsim run qft --qubits 3 --plot qft.png
    tiny-qsim info
"""
import argparse
import logging
import sys

logger = logging.getLogger(__name__)

DEMOS = ('bell', 'ghz', 'qft')


def build_demo(name, num_qubits):
    """Build one of the demo circuits."""
    from ..circuit import Circuit

    if name == 'bell':
        return Circuit(2, name='bell').bell_state(0, 1)
    if name == 'ghz':
        return Circuit(num_qubits, name='ghz').ghz_state()
    if name == 'qft':
        return Circuit(num_qubits, name='qft').qft()
    raise ValueError(f"Unknown demo '{name}'. Available: {', '.join(DEMOS)}")


def cmd_run(args):
    """Run a demo circuit and print its measurement histogram."""
    from ..visualization import show_counts, plot_counts

    qc = build_demo(args.circuit, args.qubits)
    logger.info("Running %r with %d shots", qc, args.shots)
    result = qc.run(shots=args.shots, seed=args.seed)

    print(show_counts(result.counts))
    print(f"\nGates: {result.info.gate_count}  Depth: {result.info.depth}  "
          f"Time: {result.execution_time * 1000:.2f} ms")

    if args.plot:
        plot_counts(result.counts, path=args.plot, title=f"{args.circuit} ({args.shots} shots)")
        print(f"Saved plot to {args.plot}")
    return 0


def cmd_info(args):
    """Show tiny-qsim information."""
    from .. import __version__
    from ..gates import GATE_REGISTRY

    print(f"tiny-qsim v{__version__}")
    print("State-vector quantum circuit simulator.\n")
    for arity in (1, 2, 3):
        names = sorted(k for k, v in GATE_REGISTRY.items() if v["n_qubits"] == arity)
        print(f"  {arity}-qubit gates: {', '.join(names)}")
    print(f"\nDemo circuits: {', '.join(DEMOS)}")
    return 0


def main(argv=None):
    """Main CLI entry point."""
    from ..errors import TinyQsimError

    parser = argparse.ArgumentParser(
        prog='tiny-qsim',
        description='A minimal state-vector quantum simulator'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Run command
    run_parser = subparsers.add_parser('run', help='Run a demo circuit')
    run_parser.add_argument('circuit', choices=DEMOS, help='Demo circuit')
    run_parser.add_argument('--qubits', type=int, default=3, help='Qubits for ghz/qft')
    run_parser.add_argument('--shots', type=int, default=1024, help='Number of shots')
    run_parser.add_argument('--seed', type=int, default=None, help='Sampling seed')
    run_parser.add_argument('--plot', metavar='FILE', help='Save a bar chart (needs matplotlib)')
    run_parser.set_defaults(func=cmd_run)

    # Info command
    info_parser = subparsers.add_parser('info', help='Show tiny-qsim info')
    info_parser.set_defaults(func=cmd_info)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )

    if args.command is None:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except (TinyQsimError, ValueError, ImportError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
