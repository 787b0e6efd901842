import io
import random

import pytest

from astroleaf.config import InputParameters
from astroleaf.constants import P0
from astroleaf.noradrenaline.astrocyte import Astrocyte
from astroleaf.noradrenaline.leaf import Leaf

CONFIG = """nAstroParts = 2
nLeafs = 1
d_IP3 = 0.1
d_Ca = 0.05
Rcell = 0.5
Rcell2 = 0.1
g_Ca = {g_ca}
V_m = -70
Ca_ext = 2
A_noise = 0
A_noise_leaf = 0
Simulation parameters
timeStep = 0.01
simDur = 1
seed = 3
"""


def make_params(g_ca=0.0):
    return InputParameters.from_text(CONFIG.format(g_ca=g_ca))


def make_astrocyte(tmp_path, leaf_links=(None, None), g_ca=0.0, stimulus="0.5\n0.6\n", trace=None):
    params = make_params(g_ca)
    leaves = [Leaf(0, params, (), 0, random.Random(1))]
    path = tmp_path / "in_IP3st.txt"
    if stimulus is not None:
        path.write_text(stimulus)
    astro = Astrocyte(params, [(1,), (0,)], list(leaf_links), leaves, path, trace)
    return astro, leaves


def full_step(astro, time):
    for stage in range(4):
        for part in range(len(astro.parts)):
            astro.runge_kutta_step(part, stage, time)
    for part in range(len(astro.parts)):
        astro.save_state(part)


def test_stimulus_is_read_and_reset(tmp_path):
    trace = io.StringIO()
    astro, _ = make_astrocyte(tmp_path, trace=trace)
    astro.runge_kutta_step(0, 0, 0.0)
    assert astro.p_1 == [0.5, 0.5]
    astro.runge_kutta_step(0, 0, 0.01)
    assert astro.p_1 == [0.6, 0.6]
    astro.runge_kutta_step(0, 0, 0.02)
    assert astro.p_1 == [0.6, 0.6]
    astro.runge_kutta_step(0, 0, 81.99)
    assert astro.p_1 == [0.28, 0.28]
    assert astro.n_imp == 1
    assert trace.getvalue().splitlines()[0] == "0\t0.5"


def test_missing_stimulus_file_raises(tmp_path):
    astro, _ = make_astrocyte(tmp_path, stimulus=None)
    with pytest.raises(FileNotFoundError):
        astro.runge_kutta_step(0, 0, 0.0)


def test_outside_window_keeps_baseline(tmp_path):
    astro, _ = make_astrocyte(tmp_path, stimulus=None)
    full_step(astro, 100.0)
    assert astro.p_1 == [0.28, 0.28]
    assert astro.parts[0].p > P0


def test_symmetric_parts_stay_equal(tmp_path):
    astro, _ = make_astrocyte(tmp_path)
    full_step(astro, 0.0)
    full_step(astro, 0.01)
    first, second = astro.parts
    assert first.q == second.q
    assert first.p == second.p


def test_leaf_calcium_current_raises_calcium(tmp_path):
    astro, leaves = make_astrocyte(tmp_path, leaf_links=(0, None), g_ca=0.01, stimulus=None)
    leaves[0].n2_old = 0.5
    full_step(astro, 100.0)
    assert astro.parts[0].ca_in == leaves[0].ca_old
    assert astro.parts[0].q > astro.parts[1].q


def test_save_state_copies_and_clears(tmp_path):
    astro, _ = make_astrocyte(tmp_path, stimulus=None)
    astro.runge_kutta_step(1, 0, 100.0)
    assert astro.parts[1].k_old[0] != 0.0
    astro.save_state(1)
    part = astro.parts[1]
    assert part.k_old == [0.0, 0.0, 0.0, 0.0]
    assert (part.p_old, part.q_old, part.z_old, part.n_old) == (part.p, part.q, part.z, part.n)


def test_volume_ratio_from_radii(tmp_path):
    astro, _ = make_astrocyte(tmp_path)
    part = astro.parts[0]
    assert part.vol_ratio == pytest.approx(astro.v_cell2 / part.v_cell)
    assert part.c1 == 0.235


def test_wrong_number_of_links_raises(tmp_path):
    params = make_params()
    with pytest.raises(ValueError):
        Astrocyte(params, [(1,)], [None, None], [], tmp_path / "s.txt")


def test_leaf_index_out_of_range_raises(tmp_path):
    params = make_params()
    with pytest.raises(ValueError):
        Astrocyte(params, [(1,), (0,)], [4, None], [], tmp_path / "s.txt")


def test_invalid_stage_raises(tmp_path):
    astro, _ = make_astrocyte(tmp_path)
    with pytest.raises(ValueError):
        astro.runge_kutta_step(0, 7, 100.0)