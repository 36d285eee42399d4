from __future__ import annotations

import numpy as np
import pytest

from nbody2d.core.collisions import resolve_collisions
from nbody2d.core.params import CollisionMode
from nbody2d.core.state import BodySet, radius_from_mass


def _momentum(bodies: BodySet) -> np.ndarray:
    return np.sum(bodies.vel * bodies.mass[:, None], axis=0)


def _kinetic(bodies: BodySet) -> float:
    return float(0.5 * np.sum(bodies.mass * np.sum(bodies.vel**2, axis=1)))


def test_merge_conserves_mass_and_momentum() -> None:
    bodies = BodySet(
        pos=[[0.0, 0.0], [0.5, 0.0]],
        vel=[[1.0, 0.0], [-1.0, 0.5]],
        mass=[2.0, 1.0],
    )
    report = resolve_collisions(bodies, CollisionMode.MERGE)

    assert report.merged == [(0, 1)]
    assert report.removed == [1]
    assert len(bodies) == 1
    assert not bodies.contains(1)
    with pytest.raises(KeyError):
        bodies.index_of(1)

    assert bodies.mass[0] == 3.0
    assert np.allclose(bodies.vel[0], [1.0 / 3.0, 1.0 / 6.0])
    assert np.allclose(bodies.pos[0], [1.0 / 6.0, 0.0])
    assert np.isclose(bodies.effective_radius()[0], radius_from_mass(3.0))
    assert np.array_equal(bodies.acc[0], [0.0, 0.0])


def test_heavier_body_survives_regardless_of_order() -> None:
    bodies = BodySet(
        pos=[[0.0, 0.0], [0.1, 0.0]],
        vel=np.zeros((2, 2)),
        mass=[1.0, 4.0],
        ids=[7, 3],
    )
    report = resolve_collisions(bodies)
    assert report.merged == [(3, 7)]
    assert bodies.ids.tolist() == [3]
    assert bodies.mass[0] == 5.0


def test_chain_merge_into_one() -> None:
    bodies = BodySet(
        pos=[[0.0, 0.0], [0.3, 0.0], [0.6, 0.0]],
        vel=[[0.0, 1.0], [1.0, 0.0], [0.0, -2.0]],
        mass=[3.0, 1.0, 1.0],
    )
    p0 = _momentum(bodies)
    resolve_collisions(bodies)
    assert len(bodies) == 1
    assert bodies.mass[0] == 5.0
    assert np.allclose(_momentum(bodies), p0)


def test_pinned_survives_merge_and_stays_put() -> None:
    bodies = BodySet(
        pos=[[0.0, 0.0], [0.2, 0.0]],
        vel=[[0.0, 0.0], [3.0, 0.0]],
        mass=[1.0, 10.0],
        pinned=[True, False],
    )
    resolve_collisions(bodies)
    assert bodies.ids.tolist() == [0]
    assert bodies.pinned[0]
    assert bodies.mass[0] == 11.0
    assert np.array_equal(bodies.pos[0], [0.0, 0.0])
    assert np.array_equal(bodies.vel[0], [0.0, 0.0])


@pytest.mark.parametrize("mode", [CollisionMode.MERGE, CollisionMode.ELASTIC])
def test_both_pinned_is_noop(mode) -> None:
    bodies = BodySet(
        pos=[[0.0, 0.0], [0.1, 0.0]],
        vel=np.zeros((2, 2)),
        mass=[1.0, 1.0],
        pinned=[True, True],
    )
    before = bodies.copy()
    report = resolve_collisions(bodies, mode)
    assert report.merged == []
    assert report.contacts == 0
    assert np.array_equal(bodies.pos, before.pos)
    assert len(bodies) == 2


def test_separated_and_invalid_bodies_ignored() -> None:
    bodies = BodySet(
        pos=[[0.0, 0.0], [10.0, 0.0], [0.1, 0.0], [0.0, 0.1]],
        vel=np.zeros((4, 2)),
        mass=[1.0, 1.0, 0.0, np.nan],
    )
    report = resolve_collisions(bodies)
    assert report.merged == []
    assert len(bodies) == 4


def test_off_mode_does_nothing() -> None:
    bodies = BodySet(pos=[[0.0, 0.0], [0.1, 0.0]], vel=np.zeros((2, 2)), mass=[1.0, 1.0])
    report = resolve_collisions(bodies, "off")
    assert report.merged == []
    assert len(bodies) == 2


def test_elastic_head_on_equal_masses_swap() -> None:
    bodies = BodySet(
        pos=[[0.0, 0.0], [1.0, 0.0]],
        vel=[[1.0, 0.0], [-1.0, 0.0]],
        mass=[1.0, 1.0],
        radius=[0.6, 0.6],
    )
    report = resolve_collisions(bodies, CollisionMode.ELASTIC)
    assert report.contacts == 1
    assert np.allclose(bodies.vel, [[-1.0, 0.0], [1.0, 0.0]])
    assert np.allclose(bodies.pos, [[-0.1, 0.0], [1.1, 0.0]])


def test_elastic_conserves_momentum_and_energy() -> None:
    bodies = BodySet(
        pos=[[0.0, 0.0], [0.8, 0.6]],
        vel=[[2.0, 0.5], [-1.0, -0.3]],
        mass=[1.0, 3.0],
        radius=[0.6, 0.6],
    )
    p0 = _momentum(bodies)
    ke0 = _kinetic(bodies)
    resolve_collisions(bodies, CollisionMode.ELASTIC)
    assert np.allclose(_momentum(bodies), p0)
    assert np.isclose(_kinetic(bodies), ke0)
    # Penetration 0.2 split inversely by mass: light body moves 0.15, heavy 0.05.
    normal = np.array([0.8, 0.6])
    assert np.allclose(bodies.pos[0], -0.15 * normal)
    assert np.allclose(bodies.pos[1], [0.8, 0.6] + 0.05 * normal)


def test_elastic_pinned_reflects_movable() -> None:
    bodies = BodySet(
        pos=[[0.0, 0.0], [1.0, 0.0]],
        vel=[[0.0, 0.0], [-1.0, 0.5]],
        mass=[1.0, 1.0],
        pinned=[True, False],
        radius=[0.6, 0.6],
    )
    resolve_collisions(bodies, CollisionMode.ELASTIC)
    assert np.array_equal(bodies.pos[0], [0.0, 0.0])
    assert np.array_equal(bodies.vel[0], [0.0, 0.0])
    assert np.allclose(bodies.vel[1], [1.0, 0.5])
    assert np.allclose(bodies.pos[1], [1.2, 0.0])


def test_elastic_separating_pair_keeps_velocity() -> None:
    bodies = BodySet(
        pos=[[0.0, 0.0], [1.0, 0.0]],
        vel=[[-1.0, 0.0], [1.0, 0.0]],
        mass=[1.0, 1.0],
        radius=[0.6, 0.6],
    )
    resolve_collisions(bodies, CollisionMode.ELASTIC)
    assert np.allclose(bodies.vel, [[-1.0, 0.0], [1.0, 0.0]])
    assert np.allclose(bodies.pos, [[-0.1, 0.0], [1.1, 0.0]])
