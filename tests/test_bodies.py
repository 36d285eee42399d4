from __future__ import annotations

import numpy as np
import pytest

from nbody2d.core.state import BodySet, radius_from_mass


def _pair() -> BodySet:
    return BodySet(
        pos=[[0.0, 0.0], [3.0, 4.0]],
        vel=[[1.0, 0.0], [0.0, -1.0]],
        mass=[2.0, 5.0],
    )


def test_defaults_and_shapes() -> None:
    bodies = _pair()
    assert len(bodies) == 2
    assert bodies.acc.shape == (2, 2)
    assert bodies.prev_acc.shape == (2, 2)
    assert not bodies.pinned.any()
    assert np.isnan(bodies.radius).all()
    assert list(bodies.ids) == [0, 1]


def test_shape_mismatch_raises() -> None:
    with pytest.raises(ValueError, match="mass must have shape"):
        BodySet(pos=[[0.0, 0.0], [1.0, 1.0]], vel=np.zeros((2, 2)), mass=[1.0])
    with pytest.raises(ValueError, match="vel must have shape"):
        BodySet(pos=[[0.0, 0.0]], vel=np.zeros((2, 2)), mass=[1.0])
    with pytest.raises(ValueError, match="ids must be unique"):
        BodySet(pos=np.zeros((2, 2)), vel=np.zeros((2, 2)), mass=[1.0, 1.0], ids=[3, 3])


def test_handles_survive_removal_and_are_not_reused() -> None:
    bodies = _pair()
    h = bodies.add(pos=(10.0, 0.0), vel=(0.0, 1.0), mass=3.0, pinned=True, radius=0.5)
    assert h == 2
    assert bodies.index_of(h) == 2
    assert bodies.pinned[2]
    assert bodies.radius[2] == 0.5

    bodies.remove(0)
    assert not bodies.contains(0)
    assert bodies.index_of(h) == 1
    with pytest.raises(KeyError, match="unknown body handle"):
        bodies.index_of(0)

    h2 = bodies.add(pos=(0.0, 0.0))
    assert h2 == 3


def test_empty_set() -> None:
    bodies = BodySet.empty()
    assert len(bodies) == 0
    assert bodies.valid_mask().shape == (0,)
    assert bodies.add(pos=(1.0, 1.0)) == 0
    assert len(bodies) == 1


def test_valid_mask_excludes_bad_state() -> None:
    bodies = BodySet(
        pos=[[0.0, 0.0], [np.nan, 0.0], [1.0, 1.0], [2.0, 2.0], [3.0, 3.0]],
        vel=[[0.0, 0.0], [0.0, 0.0], [np.inf, 0.0], [0.0, 0.0], [0.0, 0.0]],
        mass=[1.0, 1.0, 1.0, 0.0, -2.0],
    )
    assert bodies.valid_mask().tolist() == [True, False, False, False, False]
    bodies.pinned[0] = True
    assert not bodies.movable_mask().any()


def test_radius_derived_from_mass() -> None:
    m = 4.0 * np.pi / 3.0
    assert np.isclose(radius_from_mass(m, density=1.0), 1.0)
    assert np.isclose(radius_from_mass(8.0 * m, density=1.0), 2.0)

    bodies = _pair()
    bodies.radius[1] = 0.25
    r = bodies.effective_radius(density=2.0)
    assert np.isclose(r[0], radius_from_mass(2.0, density=2.0))
    assert r[1] == 0.25


def test_copy_is_independent() -> None:
    bodies = _pair()
    clone = bodies.copy()
    clone.pos[0, 0] = 99.0
    clone.add(pos=(0.0, 0.0))
    assert bodies.pos[0, 0] == 0.0
    assert len(bodies) == 2
    assert bodies.add(pos=(0.0, 0.0)) == 2
