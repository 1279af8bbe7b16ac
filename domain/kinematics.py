"""
Derived kinematics domain model.

Per-view quantities computed fresh for each batch and fed to histograms.
"""

from dataclasses import dataclass, fields
import awkward as ak


EVENT_QUANTITIES = ("q2", "ln_q2", "x", "ln_x")
PARTICLE_QUANTITIES = ("energy", "polar_angle", "rapidity", "weight")


@dataclass(frozen=True)
class DerivedKinematics:
    """
    Derived quantities for one view (reconstructed or generated).

    Event quantities hold one value per event; particle quantities hold one
    list per event with one value per particle. Values may be NaN or
    infinite where the derivation is undefined.
    """

    q2: ak.Array
    ln_q2: ak.Array
    x: ak.Array
    ln_x: ak.Array
    energy: ak.Array
    polar_angle: ak.Array
    rapidity: ak.Array
    weight: ak.Array

    def __len__(self) -> int:
        return len(self.q2)

    def select(self, mask) -> 'DerivedKinematics':
        """Return the quantities of the events where ``mask`` is true."""
        return DerivedKinematics(**{f.name: getattr(self, f.name)[mask] for f in fields(self)})

    @staticmethod
    def is_particle_quantity(name: str) -> bool:
        if name in PARTICLE_QUANTITIES:
            return True
        if name in EVENT_QUANTITIES:
            return False
        raise KeyError(f"Unknown derived quantity '{name}'")
