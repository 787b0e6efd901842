"""Astrocyte of the noradrenaline model: compartments coupled by diffusion."""

import math
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..constants import (
    AMP_TYPE,
    FREQ_TYPE,
    IMP_MAX_AMP,
    IMP_MIN_AMP,
    IMPULSE_AMPLITUDE,
    IMPULSE_DURATION,
    IMPULSE_FREQ,
    IMPULSE_START_TIME,
    IMPULSES_QUANTITY,
    N0,
    P0,
    P_1,
    Q0,
    RK_STAGE_OFFSETS,
    RK_STAGE_WEIGHTS,
    TR,
    Z0,
)
from ..impulse import Impulse
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

_WINDOW_END = 81.98
_RESET_TIME = 81.99


@dataclass
class AstroPart:
    """State of one astrocyte compartment."""

    neighbours: tuple
    leaf: Optional[int]
    r_cell: float
    v_cell: float
    s_cell: float
    vol_ratio: float
    impulse: Impulse
    c1: float = 0.235
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
    ca_in: float = 0.0
    n2_in: float = 0.0
    k: list = field(default_factory=lambda: [0.0] * 4)
    k_old: list = field(default_factory=lambda: [0.0] * 4)


class Astrocyte:
    """IP3 and calcium dynamics of all compartments, driven by an IP3 stimulus file."""

    def __init__(self, params, part_links, leaf_links, leaves, stimulus_path, trace=None):
        self.n_imp = 0
        self.impulse_period = 200.0
        self.leaves = list(leaves)
        self.stimulus_path = Path(stimulus_path)
        self.trace = trace
        self._stimulus = None

        n_parts = int(params.header_value(0))
        self.d_ip3 = params.header_value(2)
        self.d_ca = params.header_value(3)
        self.r_cell2 = params.header_value(5)
        self.v_cell2 = math.pi * self.r_cell2 ** 2 / 100.0
        self.s_cell2 = 2.0 * math.pi * self.r_cell2 + 2.0 * math.pi * self.r_cell2 ** 2
        self.g_ca = params.header_value(6)
        self.v_m = params.header_value(7)
        self.ca_ext = params.header_value(8)
        self.noise_amplitude = params.header_value(9)
        self.time_step = params.simulation_value(0)
        self.duration = params.simulation_value(1)
        self.seed = int(params.simulation_value(2))
        self._rng = random.Random(self.seed)

        if len(part_links) != n_parts or len(leaf_links) != n_parts:
            raise ValueError(f"connection data must describe {n_parts} parts")
        for neighbours in part_links:
            if any(not 0 <= j < n_parts for j in neighbours):
                raise ValueError(f"part neighbour out of range in {neighbours}")
        for leaf in leaf_links:
            if leaf is not None and not 0 <= leaf < len(self.leaves):
                raise ValueError(f"leaflet index {leaf} out of range")

        r_cell = params.header_value(4)
        v_cell = math.pi * r_cell ** 2 / 100.0
        self.parts = [
            AstroPart(
                neighbours=tuple(neighbours),
                leaf=leaf,
                r_cell=r_cell,
                v_cell=v_cell,
                s_cell=2.0 * math.pi * r_cell,
                vol_ratio=self.v_cell2 / v_cell,
                impulse=Impulse(
                    IMPULSE_AMPLITUDE,
                    IMPULSE_DURATION,
                    IMPULSE_START_TIME,
                    IMPULSE_FREQ,
                    IMPULSES_QUANTITY,
                    FREQ_TYPE,
                    AMP_TYPE,
                    IMP_MIN_AMP,
                    IMP_MAX_AMP,
                    self.time_step,
                    index,
                ),
            )
            for index, (neighbours, leaf) in enumerate(zip(part_links, leaf_links))
        ]
        self.p_1 = [P_1] * n_parts
        self.param = [1.0] * n_parts

    def _next_stimulus(self):
        if self._stimulus is None:
            return None
        token = next(self._stimulus, None)
        return None if token is None else float(token)

    def _update_stimulus(self, time):
        start = self.n_imp * self.impulse_period
        reset = _RESET_TIME + start
        if time == start:
            self._stimulus = iter(self.stimulus_path.read_text().split())
        if start <= time <= _WINDOW_END + start:
            value = self._next_stimulus()
            if value is not None:
                self.p_1 = [value] * len(self.parts)
        elif time == reset:
            self.p_1 = [P_1] * len(self.parts)
        if time == reset:
            self._stimulus = None
            self.n_imp += 1
        if self.trace is not None:
            self.trace.write(f"{time:g}\t{self.p_1[0]:g}\n")

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
        if cell.leaf is not None:
            leaf = self.leaves[cell.leaf]
            cell.ca_in, cell.n2_in = leaf.ca_old, leaf.n2_old
        else:
            cell.ca_in, cell.n2_in = 0.0, 0.0

        if stage == 0 and part == 0:
            self._update_stimulus(time)

        offset = RK_STAGE_OFFSETS[stage]
        p = cell.p_old + offset * cell.k_old[0]
        q = cell.q_old + offset * cell.k_old[1]
        z = cell.z_old + offset * cell.k_old[2]
        n = cell.n_old + offset * cell.k_old[3]
        dt = self.time_step

        own_current = calcium_current(
            n, q, cell.s_cell, cell.v_cell, self.g_ca, self.v_m, self.ca_ext
        )
        leaf_current = calcium_current(
            cell.n2_in, cell.ca_in, self.s_cell2, self.v_cell2, self.g_ca, self.v_m, self.ca_ext
        )
        cell.k = [
            (cell.p_in + (self.p_1[part] - p) * TR + jplc(q)) * dt,
            (
                cell.q_in
                + cell.c1 * (j_channel(p, q, z, cell.c1) - j_pump(q) + j_leak(q, cell.c1))
                + j_in(p)
                - j_out(q)
                + self.param[part] * own_current
                + cell.vol_ratio * leaf_current
            )
            * dt,
            ((h_fun(p, q) - z) / tn(p, q)) * dt,
            (
                (m_inf(self.v_m) - n) / tau_inf(self.v_m)
                + summed_uniform_noise(self._rng, self.noise_amplitude)
            )
            * dt,
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