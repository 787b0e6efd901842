import math
import random

import pytest

from astroleaf.config import InputParameters
from astroleaf.constants import FrequencyType
from astroleaf.kinetics import m_inf
from astroleaf.noradrenaline.leaf import Leaf, find_connected_part

CONFIG = """nAstroParts = 2
nLeafs = 2
d_IP3 = 0.1
d_Ca = 0.05
Rcell = 0.5
Rcell2 = 0.1
g_Ca = {g_ca}
V_m = -70
Ca_ext = 2
A_noise = 0
A_noise_leaf = {noise}
Simulation parameters
timeStep = 0.01
simDur = 1
seed = 3
"""


def make_params(g_ca=0.0, noise=0.0):
    return InputParameters.from_text(CONFIG.format(g_ca=g_ca, noise=noise))


def full_step(leaf, time=0.0):
    for stage in range(4):
        leaf.runge_kutta_step(stage, time)
    leaf.save_state()


def test_find_connected_part():
    text = "0\n1\t0\n1\t1\n"
    assert find_connected_part(text, 1) == 2
    assert find_connected_part(text, 0) == 1
    assert find_connected_part(text, 5) is None


def test_reads_parameters():
    leaf = Leaf(0, make_params(), (1,), None, random.Random(0))
    assert leaf.time_step == 0.01
    assert leaf.r_cell2 == 0.1
    assert leaf.neighbours == (1,)


def test_calcium_relaxes_like_exact_solution():
    leaf = Leaf(0, make_params(), (), None, random.Random(0))
    full_step(leaf)
    expected = 0.075 + (0.08 - 0.075) * math.exp(-0.01 / 2.0)
    assert abs(leaf.ca - expected) < 1e-12
    assert leaf.ca_old == leaf.ca


def test_sodium_stays_at_rest():
    leaf = Leaf(0, make_params(), (), None, random.Random(0))
    full_step(leaf)
    full_step(leaf)
    assert leaf.na == 16.0


def test_channel_gate_moves_towards_steady_state():
    leaf = Leaf(0, make_params(), (), None, random.Random(0))
    full_step(leaf)
    assert 0.0 < leaf.n2 < m_inf(-70.0)


def test_calcium_is_clamped():
    leaf = Leaf(0, make_params(), (), None, random.Random(0))
    leaf.ca = -5.0
    leaf.runge_kutta_step(0, 0.0)
    assert leaf.ca == 0.01


def test_save_state_resets_coefficients():
    leaf = Leaf(0, make_params(), (), None, random.Random(0))
    leaf.runge_kutta_step(0, 0.0)
    assert any(value != 0.0 for value in leaf.k_old)
    leaf.save_state()
    assert leaf.k_old == [0.0, 0.0, 0.0, 0.0]
    assert leaf.h_old == leaf.h


def test_same_seed_gives_same_noise():
    first = Leaf(0, make_params(noise=0.5), (), None, random.Random(11))
    second = Leaf(0, make_params(noise=0.5), (), None, random.Random(11))
    full_step(first)
    full_step(second)
    assert first.n2 == second.n2


def test_invalid_stage_raises():
    leaf = Leaf(0, make_params(), (), None, random.Random(0))
    with pytest.raises(ValueError):
        leaf.runge_kutta_step(4, 0.0)


def test_impulse_type_depends_on_connection():
    unlinked = Leaf(0, make_params(), (), None, random.Random(0))
    linked = Leaf(1, make_params(), (), 0, random.Random(0))
    assert unlinked.impulse.freq_type is FrequencyType.NEVER
    assert unlinked.impulse.create_impulse(5.0, True) == 0.0
    assert linked.impulse.freq_type is FrequencyType.POISSON