"""Astrocyte of the leaflet experiment: compartments with noisy IP3 production."""

import math
import random
from dataclasses import dataclass, field

from ..constants import (
    N0,
    P0,
    P_1,
    Q0,
    RK_STAGE_OFFSETS,
    RK_STAGE_WEIGHTS,
    TR,
    Z0,
)
from ..kinetics import (
    calcium_current,
    h_fun,
    j_channel,
    j_in,
    j_leak,
    j_out,
    j_pump,
    jplc,
    m_inf,
    summed_uniform_noise,
    tau_inf,
    tn,
)

# Compartments that receive the first IP3 noise source.
IP3_NOISE_PARTS = frozenset(
    {
        0, 2, 3, 6, 7, 8, 9, 11, 12, 13, 14, 15, 18, 19, 21, 23,
        26, 27, 28, 30, 31, 33, 34, 36, 38, 39, 41, 43, 44, 45, 47, 49,
    }
)
# Compartments that receive the second IP3 noise source as well.
SECOND_IP3_NOISE_PARTS = frozenset({0, 9, 23, 38})

_C1 = 0.2367


@dataclass
class AstroPart:
    """State of one astrocyte compartment."""

    neighbours: tuple
    leaves: tuple
    c1: float = _C1
    p: float = P0
    q: float = Q0
    z: float = Z0
    n: float = N0
    p_old: float = P0
    q_old: float = Q0
    z_old: float = Z0
    n_old: float = N0
    p_in: float = 0.0
    q_in: float = 0.0
    k: list = field(default_factory=lambda: [0.0] * 4)
    k_old: list = field(default_factory=lambda: [0.0] * 4)


class Astrocyte:
    """IP3 and calcium dynamics of all compartments, coupled by diffusion."""

    def __init__(self, params, part_links, leaf_links, leaves):
        self.leaves = list(leaves)

        n_parts = int(params.header_value(0))
        self.d_ip3 = params.header_value(2)
        self.d_ca = params.header_value(3)
        self.r_cell = params.header_value(4)
        self.v_cell = math.pi * self.r_cell ** 2 / 100.0
        self.s_cell = 2.0 * math.pi * self.r_cell
        self.r_cell2 = params.header_value(5)
        self.v_cell2 = math.pi * self.r_cell2 ** 2 / 100.0
        self.s_cell2 = 2.0 * math.pi * self.r_cell2
        self.g_ca = params.header_value(6)
        self.v_m = params.header_value(7)
        self.ca_ext = params.header_value(8)
        self.noise_amplitude = params.header_value(9)
        self.ip3_noise_amplitude = params.header_value(10)
        self.time_step = params.simulation_value(0)
        self.duration = params.simulation_value(1)
        self.seed = int(params.simulation_value(2))

        self._rng = random.Random(self.seed)
        self._rng_ip3 = random.Random(self.seed + 1)
        self._rng_ip3_second = random.Random(self.seed + 2)

        if len(part_links) != n_parts or len(leaf_links) != n_parts:
            raise ValueError(f"connection data must describe {n_parts} parts")
        for neighbours in part_links:
            if any(not 0 <= j < n_parts for j in neighbours):
                raise ValueError(f"part neighbour out of range in {neighbours}")
        for part_leaves in leaf_links:
            if any(not 0 <= j < len(self.leaves) for j in part_leaves):
                raise ValueError(f"leaflet index out of range in {part_leaves}")

        self.parts = [
            AstroPart(neighbours=tuple(neighbours), leaves=tuple(part_leaves))
            for neighbours, part_leaves in zip(part_links, leaf_links)
        ]
        self.ip3_noise_gain = [1.0 if i in IP3_NOISE_PARTS else 0.0 for i in range(n_parts)]
        self.second_noise_gain = [
            1.0 if i in SECOND_IP3_NOISE_PARTS else 0.0 for i in range(n_parts)
        ]

    def runge_kutta_step(self, part, stage, time):
        """Evaluate one Runge-Kutta stage for compartment ``part``."""
        if stage not in range(len(RK_STAGE_OFFSETS)):
            raise ValueError(f"Runge-Kutta stage must be 0-3, got {stage}")
        if not 0 <= part < len(self.parts):
            raise IndexError(f"no astrocyte part {part}")
        cell = self.parts[part]

        n_links = len(cell.neighbours)
        cell.p_in = self.d_ip3 * (
            sum(self.parts[j].p_old for j in cell.neighbours) - n_links * cell.p_old
        )
        cell.q_in = self.d_ca * (
            sum(self.parts[j].q_old for j in cell.neighbours) - n_links * cell.q_old
        )

        offset = RK_STAGE_OFFSETS[stage]
        p = cell.p_old + offset * cell.k_old[0]
        q = cell.q_old + offset * cell.k_old[1]
        z = cell.z_old + offset * cell.k_old[2]
        n = cell.n_old + offset * cell.k_old[3]
        dt = self.time_step

        ip3_noise = summed_uniform_noise(self._rng_ip3, self.ip3_noise_amplitude)
        second_noise = summed_uniform_noise(self._rng_ip3_second, self.ip3_noise_amplitude)
        channel_noise = summed_uniform_noise(self._rng, self.noise_amplitude)
        current = calcium_current(n, q, self.s_cell, self.v_cell, self.g_ca, self.v_m, self.ca_ext)

        cell.k = [
            (
                cell.p_in
                + (P_1 - p) * TR
                + jplc(q)
                + self.ip3_noise_gain[part] * ip3_noise
                + self.second_noise_gain[part] * second_noise
            )
            * dt,
            (
                cell.q_in
                + cell.c1 * (j_channel(p, q, z, cell.c1) - j_pump(q) + j_leak(q, cell.c1))
                + j_in(p)
                - j_out(q)
                + current
            )
            * dt,
            ((h_fun(p, q) - z) / tn(p, q)) * dt,
            ((m_inf(self.v_m) - n) / tau_inf(self.v_m) + channel_noise) * dt,
        ]

        weight = RK_STAGE_WEIGHTS[stage] / 6.0
        cell.p += weight * cell.k[0]
        cell.q += weight * cell.k[1]
        cell.z += weight * cell.k[2]
        cell.n += weight * cell.k[3]
        cell.k_old = list(cell.k)

    def save_state(self, part):
        """Make the accumulated state of ``part`` the start of the next step."""
        cell = self.parts[part]
        cell.p_old = cell.p
        cell.q_old = cell.q
        cell.z_old = cell.z
        cell.n_old = cell.n
        cell.k_old = [0.0] * 4