"""Command-line entry point.

Usage:
    python -m polyopt --coeffs 1,0,-1,0,1 --n 2 --d 2 --k 0-2
    python -m polyopt --coeffs 1,0,1 --n 2 --d 1 --k 0 --method sdp --inner
    python -m polyopt --coeffs ... --n 3 --d 2 --k 0,1 --direction min --target 0.2 --inner

Exit codes: 0 ok, 1 solver/sampler failure, 2 bad arguments.
"""
import argparse
import sys
import time
from datetime import datetime

from .budget import SampleBudget, TimeBudget
from .config import REFINE_TIME_FRACTION
from .errors import InvalidArgument, PolyOptError, SamplingError
from .output import fmt_bound, log, save_results
from .sweep import is_tightening, parse_levels, sweep_levels


def parse_coeffs(raw):
    vals = [s.strip() for s in raw.replace(";", ",").split(",") if s.strip()]
    if not vals:
        raise InvalidArgument("coefficients cannot be empty")
    try:
        return [float(v) for v in vals]
    except ValueError as e:
        raise InvalidArgument(f"bad coefficient list: {e}")


def build_parser():
    parser = argparse.ArgumentParser(
        prog='polyopt',
        description='Bound the max/min of a homogeneous polynomial on the unit sphere')
    parser.add_argument('--coeffs', required=True,
                        help='Comma-separated coefficients in lexicographic monomial order')
    parser.add_argument('--n', type=int, required=True, help='Number of variables')
    parser.add_argument('--d', type=int, required=True, help='Half the degree')
    parser.add_argument('--k', type=str, default='0',
                        help="Hierarchy level(s): '2', '0,1,2' or '0-3' (default: 0)")
    parser.add_argument('--method', choices=['spectral', 'sdp'], default='spectral',
                        help='Outer-bound method (default: spectral)')
    parser.add_argument('--direction', choices=['max', 'min'], default='max',
                        help='Maximize or minimize (default: max)')
    parser.add_argument('--target', type=float, default=None,
                        help='Skip the inner bound once the outer bound certifies this value')
    parser.add_argument('--inner', action='store_true',
                        help='Also compute inner bounds')
    parser.add_argument('--samples', type=int, default=None,
                        help='Fixed number of random samples instead of the time budget')
    parser.add_argument('--refine-fraction', type=float, default=REFINE_TIME_FRACTION,
                        help=f'Sampling time as a fraction of outer-bound time '
                             f'(default: {REFINE_TIME_FRACTION})')
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument('--jobs', type=int, default=1,
                        help='Parallel jobs across levels (default: 1)')
    parser.add_argument('--output', type=str, default=None,
                        help='Write results JSON to this path')
    parser.add_argument('--quiet', action='store_true', help='Only print the result lines')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    verbose = not args.quiet

    try:
        coeffs = parse_coeffs(args.coeffs)
        levels = parse_levels(args.k)
        if args.samples is not None:
            budget = SampleBudget(args.samples)
        else:
            budget = TimeBudget(args.refine_fraction)
        t0 = time.time()
        results = sweep_levels(coeffs, args.n, args.d, levels,
                               method=args.method, direction=args.direction,
                               target=args.target, with_inner=args.inner,
                               budget=budget, seed=args.seed, n_jobs=args.jobs,
                               verbose=False)
    except InvalidArgument as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except SamplingError as e:
        print(f"sampling failed: {e} (inner bound so far: {fmt_bound(e.partial)})",
              file=sys.stderr)
        return 1
    except PolyOptError as e:
        print(f"solver failed: {e}", file=sys.stderr)
        return 1

    if verbose:
        log(f"{args.method} bounds for n={args.n}, d={args.d}, "
            f"direction={args.direction}, levels={levels}")
    for r in results:
        line = f"k={r['k']:<3d} size={r['size']:<6d} ob={fmt_bound(r['ob'])}"
        if args.inner:
            line += f"  ib={fmt_bound(r['ib'])}"
            if r['ib_skipped']:
                line += " (target reached)"
        line += f"  [{r['ob_time']:.3f}s]"
        print(line, flush=True)
    if verbose and len(results) > 1 and not is_tightening(results):
        log("note: outer bound did not tighten monotonically across levels")

    if args.output:
        save_results({
            'timestamp': datetime.now().strftime("%Y%m%d_%H%M%S"),
            'coeffs': coeffs, 'n': args.n, 'd': args.d,
            'method': args.method, 'direction': args.direction,
            'target': args.target, 'elapsed': time.time() - t0,
            'levels': results,
        }, args.output)
        if verbose:
            log(f"results saved to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
