"""Leaflet compartment of the noradrenaline model."""

import math
import random

from ..constants import (
    AMP_TYPE,
    CA_0,
    CA_REST,
    FREQ_TYPE,
    H_0,
    IMP_MAX_AMP,
    IMP_MIN_AMP,
    IMPULSE_AMPLITUDE,
    IMPULSE_DURATION,
    IMPULSE_FREQ,
    IMPULSE_START_TIME,
    IMPULSES_QUANTITY,
    N2_0,
    NA_0,
    NA_REST,
    RK_STAGE_OFFSETS,
    RK_STAGE_WEIGHTS,
    TAU_CA,
    TAU_NA,
    FrequencyType,
)
from ..impulse import Impulse
from ..kinetics import calcium_current, h_inf, m_inf, summed_uniform_noise, tau_h, tau_inf

_MIN_CA = 0.01
_SEARCH_LIMIT = 1000


def find_connected_part(text, index):
    """Return the number of the first line mentioning leaflet ``index`` as linked, or None."""
    needle = f"1\t{index}"
    lines = text.split("\n")
    for part in range(_SEARCH_LIMIT + 1):
        line = lines[part] if part < len(lines) else ""
        if needle in line:
            return part
    return None


def _check_stage(stage):
    if stage not in range(len(RK_STAGE_OFFSETS)):
        raise ValueError(f"Runge-Kutta stage must be 0-3, got {stage}")


class Leaf:
    """Calcium, sodium, gate and channel dynamics of one leaflet."""

    def __init__(self, index, params, neighbours, astro_part, rng=None):
        self.index = index
        self.neighbours = tuple(neighbours)
        self.astro_part = astro_part
        self._rng = rng if rng is not None else random.Random()

        self.r_cell = params.header_value(4)
        self.v_cell = math.pi * self.r_cell ** 2 / 100.0
        self.s_cell = 2.0 * math.pi * self.r_cell
        self.r_cell2 = params.header_value(5)
        self.v_cell2 = math.pi * self.r_cell2 ** 2 / 100.0
        self.s_cell2 = 2.0 * math.pi * self.r_cell2 + 2.0 * math.pi * self.r_cell2 ** 2
        self.g_ca = params.header_value(6)
        self.v_m = params.header_value(7)
        self.ca_ext = params.header_value(8)
        self.noise_amplitude = params.header_value(10)
        self.time_step = params.simulation_value(0)
        self.duration = params.simulation_value(1)

        self.ca = self.ca_old = CA_0
        self.na = self.na_old = NA_0
        self.h = self.h_old = H_0
        self.n2 = self.n2_old = N2_0
        self.k = [0.0] * 4
        self.k_old = [0.0] * 4

        if astro_part is not None:
            freq_type, seed = FREQ_TYPE, astro_part
        else:
            freq_type, seed = FrequencyType.NEVER, -1
        self.impulse = Impulse(
            IMPULSE_AMPLITUDE,
            IMPULSE_DURATION,
            IMPULSE_START_TIME,
            IMPULSE_FREQ,
            IMPULSES_QUANTITY,
            freq_type,
            AMP_TYPE,
            IMP_MIN_AMP,
            IMP_MAX_AMP,
            self.time_step,
            seed,
            self._rng,
        )

    def runge_kutta_step(self, stage, time):
        """Evaluate one stage of the fourth-order Runge-Kutta scheme."""
        _check_stage(stage)
        offset = RK_STAGE_OFFSETS[stage]
        ca = self.ca_old + offset * self.k_old[0]
        na = self.na_old + offset * self.k_old[1]
        h = self.h_old + offset * self.k_old[2]
        n2 = self.n2_old + offset * self.k_old[3]
        dt = self.time_step

        influx = calcium_current(
            n2, ca, self.s_cell2, self.v_cell2, self.g_ca, self.v_m, self.ca_ext
        )
        self.k = [
            ((CA_REST - ca) / TAU_CA + influx) * dt,
            ((NA_REST - na) / TAU_NA) * dt,
            ((h_inf(ca, na) - h) / tau_h(ca)) * dt,
            (
                (m_inf(self.v_m) - n2) / tau_inf(self.v_m)
                + summed_uniform_noise(self._rng, self.noise_amplitude)
            )
            * dt,
        ]

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
        self.k_old = [0.0] * 4