"""Command-line runner for the built-in scenarios."""

from __future__ import annotations

import argparse
import logging

import numpy as np

from . import __version__
from .core.diagnostics import compute_diagnostics
from .core.params import CollisionMode, IntegratorKind, StepParameters
from .core.run import run
from .scenarios import SCENARIOS


logger = logging.getLogger("nbody2d")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nbody2d", description=f"nbody2d v{__version__}")
    parser.add_argument("--scenario", choices=sorted(SCENARIOS), default="two_body")
    parser.add_argument("--steps", type=int, default=10_000)
    parser.add_argument("--dt", type=float, default=1e-3)
    parser.add_argument("--G", type=float, default=1.0)
    parser.add_argument("--softening", type=float, default=0.0)
    parser.add_argument(
        "--integrator",
        choices=[k.value for k in IntegratorKind],
        default=IntegratorKind.VELOCITY_VERLET.value,
    )
    parser.add_argument(
        "--collisions",
        choices=[c.value for c in CollisionMode],
        default=CollisionMode.OFF.value,
    )
    parser.add_argument("--theta", type=float, default=0.5)
    parser.add_argument("--bh-threshold", type=int, default=200)
    parser.add_argument("-n", "--bodies", type=int, default=500, help="cluster size")
    parser.add_argument("--report-every", type=int, default=1000)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    params = StepParameters(
        G=args.G,
        softening=args.softening,
        bh_threshold=args.bh_threshold,
        bh_theta=args.theta,
        integrator=IntegratorKind(args.integrator),
        fixed_dt=args.dt,
        max_substep=max(args.dt, 1e-12),
        collisions=CollisionMode(args.collisions),
    )
    if args.scenario == "two_body":
        bodies = SCENARIOS["two_body"](G=args.G)
    elif args.scenario == "central":
        bodies = SCENARIOS["central"](G=args.G)
    else:
        bodies = SCENARIOS["cluster"](args.bodies)

    d0 = compute_diagnostics(bodies, params.G, params.eps2)
    logger.info("scenario %s: %d bodies, E0=%.6e", args.scenario, len(bodies), d0.total)

    def report(i: int, state) -> None:
        if i % args.report_every != 0:
            return
        d = compute_diagnostics(state, params.G, params.eps2)
        logger.info(
            "step %6d | n=%d | E=%.6e dE/E0=%.3e | |p|=%.3e",
            i,
            len(state),
            d.total,
            (d.total - d0.total) / abs(d0.total) if d0.total else 0.0,
            float(np.linalg.norm(d.momentum)),
        )

    result = run(bodies, params, args.steps, callback=report, stop_on_divergence=True)
    if not result.ok:
        logger.error("diverged after %d steps", result.steps_taken)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
