"""
Kinematic calculations for NEC event processing.

Provides functions for collection availability checks, Q2 window
selection, and the per-event and per-particle derived quantities.
Undefined results (log of a non-positive number, angle of a zero vector)
come back as NaN or infinities instead of raising.
"""
import awkward as ak
import numpy as np
import vector
from typing import Iterable

from domain.kinematics import DerivedKinematics
from services.calculations import consts


def has_records(collection: ak.Array) -> np.ndarray:
    return ak.to_numpy(ak.num(collection, axis=1) > 0)


def has_all_collections(events: ak.Array, collection_names: Iterable[str]) -> np.ndarray:
    """
    Mask of events where every named collection holds at least one record.

    A collection absent from the batch counts as empty.
    """
    mask = np.ones(len(events), dtype=bool)
    for name in collection_names:
        if name not in events.fields:
            return np.zeros(len(events), dtype=bool)
        mask &= has_records(events[name])
        if not mask.any():
            break
    return mask


def in_q2_window(q2: ak.Array, min_q2: float, max_q2: float) -> np.ndarray:
    """Strict window: boundary values are rejected, NaN is rejected."""
    q2 = ak.to_numpy(q2)
    return (q2 > min_q2) & (q2 < max_q2)


def first_record(collection: ak.Array) -> ak.Array:
    """First record of each event's collection. Collections must be non-empty."""
    return collection[:, 0]


def safe_log(values: ak.Array) -> ak.Array:
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.log(values)


def momentum_vectors(particles: ak.Array) -> ak.Array:
    return vector.zip({
        "x": ak.values_astype(particles.px, np.float64),
        "y": ak.values_astype(particles.py, np.float64),
        "z": ak.values_astype(particles.pz, np.float64),
    })


def polar_angle(particles: ak.Array) -> ak.Array:
    """
    Polar angle of each particle's momentum, acos(pz / |p|).

    Evaluated as atan2(rho, pz), which equals acos(pz / |p|) for any nonzero
    vector. Zero momentum gives NaN.
    """
    momentum = momentum_vectors(particles)
    return ak.where(momentum.mag > 0, momentum.theta, np.nan)


def rapidity(theta: ak.Array) -> ak.Array:
    """ln(tan(theta / 2)); diverges to -inf at theta = 0."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.log(np.tan(theta / 2))


def energy_fraction_weight(
    xb: ak.Array,
    energy: ak.Array,
    beam_energy: float = consts.PROTON_BEAM_ENERGY_GEV
) -> ak.Array:
    """
    Approximate per-particle energy fraction x * (E / E_beam).

    ``xb`` has one value per event and is broadcast over that event's particles.
    """
    return xb * (energy / beam_energy)


def derive_view(kinematics: ak.Array, particles: ak.Array) -> DerivedKinematics:
    """
    Compute all derived quantities for one view.

    Args:
        kinematics: Inclusive kinematics collection, non-empty in every event
        particles: Particle collection of the same events

    Returns:
        DerivedKinematics for the view
    """
    first = first_record(kinematics)
    q2 = ak.values_astype(first.Q2, np.float64)
    xb = ak.values_astype(first.x, np.float64)

    energy = ak.values_astype(particles.energy, np.float64)
    theta = polar_angle(particles)

    return DerivedKinematics(
        q2=q2,
        ln_q2=safe_log(q2),
        x=xb,
        ln_x=safe_log(xb),
        energy=energy,
        polar_angle=theta,
        rapidity=rapidity(theta),
        weight=energy_fraction_weight(xb, energy),
    )
