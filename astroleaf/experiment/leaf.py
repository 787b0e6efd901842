"""Leaflet compartment of the leaflet experiment model."""

import math
import random

from ..constants import (
    CA_0,
    CA_REST,
    H_0,
    N2_0,
    NA_0,
    NA_REST,
    RK_STAGE_OFFSETS,
    RK_STAGE_WEIGHTS,
    TAU_CA,
    TAU_NA,
    AmplitudeType,
    FrequencyType,
)
from ..impulse import Impulse
from ..kinetics import calcium_current, h_inf, m_inf, summed_uniform_noise, tau_h, tau_inf

_MIN_CA = 0.01
_N_COEFFS = 6
_CHANNEL_SCALE = 0.1
_INT_MAX = 2 ** 31 - 1

_IMPULSE_AMPLITUDE = 10.0
_IMPULSE_DURATION = 0.08
_IMPULSE_START_TIME = 50.0
_IMPULSE_FREQ = 0.02
_IMPULSES_QUANTITY = 5
_IMPULSE_FREQ_TYPE = FrequencyType.CONST
_IMPULSE_AMP_TYPE = AmplitudeType.CONST
_IMP_MIN_AMP = 0.0
_IMP_MAX_AMP = 0.0


def owning_part(leaf_links, index):
    """Return the last astrocyte part whose leaflet list holds ``index``, or None."""
    owner = None
    for part, leaves in enumerate(leaf_links):
        if index in leaves:
            owner = part
    return owner


class Leaf:
    """Calcium, sodium, gate and channel dynamics of one leaflet."""

    def __init__(self, index, params, neighbours, astro_part, rng=None):
        self.index = index
        self.neighbours = tuple(neighbours)
        self.astro_part = astro_part
        self._rng = rng if rng is not None else random.Random()

        self.n_leaves = int(params.header_value(1))
        self.r_cell = params.header_value(4)
        self.v_cell = math.pi * self.r_cell ** 2 / 100.0
        self.s_cell = 2.0 * math.pi * self.r_cell
        self.r_cell2 = params.header_value(5)
        self.v_cell2 = math.pi * self.r_cell2 ** 2 / 100.0
        self.s_cell2 = 2.0 * math.pi * self.r_cell2 + 2.0 * math.pi * self.r_cell2 ** 2
        self.g_ca = params.header_value(6)
        self.v_m = params.header_value(7)
        self.ca_ext = params.header_value(8)
        self.noise_amplitude = params.header_value(11)
        self.time_step = params.simulation_value(0)
        self.duration = params.simulation_value(1)
        self.seed = int(params.simulation_value(2))

        self.ca = self.ca_old = CA_0
        self.na = self.na_old = NA_0
        self.h = self.h_old = H_0
        self.n2 = self.n2_old = N2_0
        self.k = [0.0] * _N_COEFFS
        self.k_old = [0.0] * _N_COEFFS

        quantity = _IMPULSES_QUANTITY
        if quantity == -1:
            quantity = _INT_MAX
        self.impulse = Impulse(
            _IMPULSE_AMPLITUDE,
            _IMPULSE_DURATION,
            _IMPULSE_START_TIME,
            _IMPULSE_FREQ,
            quantity,
            _IMPULSE_FREQ_TYPE,
            _IMPULSE_AMP_TYPE,
            _IMP_MIN_AMP,
            _IMP_MAX_AMP,
            self.time_step,
            index + self.seed,
            self._rng,
        )

    def _channel_current(self, n2, ca):
        return _CHANNEL_SCALE * calcium_current(
            n2, ca, self.s_cell2, self.v_cell2, self.g_ca, self.v_m, self.ca_ext
        )

    def runge_kutta_step(self, stage, time):
        """Evaluate one stage of the fourth-order Runge-Kutta scheme."""
        if stage not in range(len(RK_STAGE_OFFSETS)):
            raise ValueError(f"Runge-Kutta stage must be 0-3, got {stage}")
        offset = RK_STAGE_OFFSETS[stage]
        ca = self.ca_old + offset * self.k_old[0]
        na = self.na_old + offset * self.k_old[1]
        h = self.h_old + offset * self.k_old[2]
        n2 = self.n2_old + offset * self.k_old[3]
        dt = self.time_step

        self.k[0] = ((CA_REST - ca) / TAU_CA + self._channel_current(n2, ca)) * dt
        self.k[1] = ((NA_REST - na) / TAU_NA) * dt
        self.k[2] = ((h_inf(ca, na) - h) / tau_h(ca)) * dt
        self.k[3] = (
            (m_inf(self.v_m) - n2) / tau_inf(self.v_m)
            + summed_uniform_noise(self._rng, self.noise_amplitude)
        ) * dt

        weight = RK_STAGE_WEIGHTS[stage] / 6.0
        self.ca += weight * self.k[0]
        self.na += weight * self.k[1]
        self.h += weight * self.k[2]
        self.n2 += weight * self.k[3]
        self.k_old = list(self.k)

        if self.ca < _MIN_CA:
            self.ca = _MIN_CA

    def save_state(self):
        """Make the accumulated state the starting point of the next step."""
        self.ca_old = self.ca
        self.na_old = self.na
        self.h_old = self.h
        self.n2_old = self.n2
        self.k_old = [0.0] * _N_COEFFS