from __future__ import annotations

import pytest

from nbody2d.core.params import (
    CollisionMode,
    IntegratorKind,
    StepParameters,
    params_from_dict,
    params_to_dict,
)


def test_defaults() -> None:
    params = StepParameters()
    assert params.integrator is IntegratorKind.VELOCITY_VERLET
    assert params.collisions is CollisionMode.MERGE
    assert params.max_speed == 0.0
    assert params.eps2 == 0.0


def test_effective_dt_fixed_and_variable() -> None:
    fixed = StepParameters(fixed_dt=0.01, time_scale=3.0)
    assert fixed.effective_dt(0.5) == pytest.approx(0.03)

    variable = StepParameters(use_fixed_dt=False, fixed_dt=0.01, time_scale=2.0)
    assert variable.effective_dt(0.25) == pytest.approx(0.5)
    assert variable.effective_dt(None) == pytest.approx(0.02)

    reversed_time = StepParameters(time_scale=-1.0)
    assert reversed_time.effective_dt() == 0.0


@pytest.mark.parametrize("elapsed", [float("inf"), float("-inf"), float("nan")])
def test_non_finite_elapsed_gives_zero_dt(elapsed) -> None:
    params = StepParameters(use_fixed_dt=False)
    assert params.effective_dt(elapsed) == 0.0
    assert params.substeps(elapsed) == (1, 0.0)


def test_huge_dt_uses_every_substep() -> None:
    params = StepParameters(max_substep=1e-300, max_substeps_per_frame=4)
    n, dt_sub = params.substeps(1e300)
    assert n == 4
    assert dt_sub == pytest.approx(2.5e299)


def test_substep_plan() -> None:
    params = StepParameters(max_substep=0.01, max_substeps_per_frame=8)
    assert params.substeps(0.005) == (1, 0.005)
    n, dt = params.substeps(0.035)
    assert n == 4
    assert dt == pytest.approx(0.00875)
    n, dt = params.substeps(10.0)
    assert n == 8
    assert dt == pytest.approx(1.25)
    assert params.substeps(0.0) == (1, 0.0)


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"G": -1.0}, "G must be finite"),
        ({"softening": float("nan")}, "softening must be finite"),
        ({"fixed_dt": 0.0}, "fixed_dt must be finite and > 0"),
        ({"max_substep": -1.0}, "max_substep must be finite and > 0"),
        ({"max_substeps_per_frame": 0}, "max_substeps_per_frame"),
        ({"bh_threshold": -5}, "bh_threshold"),
        ({"time_scale": float("inf")}, "time_scale must be finite"),
    ],
)
def test_invalid_values_rejected(kwargs, message) -> None:
    with pytest.raises(ValueError, match=message):
        StepParameters(**kwargs)


def test_params_from_dict() -> None:
    params = params_from_dict(
        {
            "G": 2.0,
            "softening": 0.1,
            "integrator": "SEMI_IMPLICIT_EULER",
            "collisions": "elastic",
            "bh_threshold": "50",
        }
    )
    assert params.G == 2.0
    assert params.integrator is IntegratorKind.SEMI_IMPLICIT_EULER
    assert params.collisions is CollisionMode.ELASTIC
    assert params.bh_threshold == 50
    assert params.eps2 == pytest.approx(0.01)

    again = params_from_dict(params_to_dict(params))
    assert again == params


def test_params_from_dict_rejects_bad_input() -> None:
    with pytest.raises(ValueError, match="unknown step parameters: paused"):
        params_from_dict({"paused": True})
    with pytest.raises(ValueError, match="unsupported integrator: rk4"):
        params_from_dict({"integrator": "rk4"})
    with pytest.raises(ValueError, match="unsupported collision mode"):
        params_from_dict({"collisions": "sticky"})


def test_replace_keeps_validation() -> None:
    params = StepParameters().replace(bh_theta=0.0)
    assert params.bh_theta == 0.0
    with pytest.raises(ValueError):
        StepParameters().replace(fixed_dt=-1.0)
