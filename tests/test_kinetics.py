import random

import pytest

from astroleaf import kinetics
from astroleaf.constants import CA_REST, D1, D5, K_1, K_2, K_3, TAU_O, V3, V4, V6


def test_jplc_saturates_below_v4():
    assert kinetics.jplc(0.5) < V4
    assert kinetics.jplc(1e9) == pytest.approx(V4, abs=1e-6)
    assert kinetics.jplc(0.1) < kinetics.jplc(1.0)


def test_half_saturation_points():
    assert kinetics.m_fun(D1) == pytest.approx(0.5)
    assert kinetics.n_fun(D5) == pytest.approx(0.5)
    assert kinetics.j_pump(K_3) == pytest.approx(V3 / 2)
    assert kinetics.j_in(K_2) == pytest.approx(V6 / 2)


def test_ca_er_at_zero_cytosolic_calcium():
    assert kinetics.ca_er(0.0, 0.2) == pytest.approx(20.0)
    assert kinetics.ca_er(0.1, 0.2) < kinetics.ca_er(0.0, 0.2)


def test_j_channel_cubic_in_gate():
    base = kinetics.j_channel(0.2, 0.1, 0.3, 0.235)
    assert kinetics.j_channel(0.2, 0.1, 0.6, 0.235) == pytest.approx(8 * base)
    assert kinetics.j_channel(0.2, 0.1, 0.0, 0.235) == 0.0


def test_j_leak_decreases_with_calcium():
    assert kinetics.j_leak(0.05, 0.235) > kinetics.j_leak(0.5, 0.235)


def test_j_out_is_linear():
    assert kinetics.j_out(0.4) / 0.4 == pytest.approx(K_1)


def test_h_fun_and_tn():
    assert kinetics.h_fun(0.3, 0.0) == pytest.approx(1.0)
    value = kinetics.h_fun(0.3, 0.2)
    assert 0.0 < value < 1.0
    assert kinetics.tn(0.3, 0.2) > 0.0
    assert kinetics.q2(0.1) < kinetics.q2(1.0)


def test_gating_relations():
    v = -60.0
    assert kinetics.m_inf(v) / kinetics.tau_inf(v) == pytest.approx(kinetics.alpha_m(v))
    assert 0.0 < kinetics.m_inf(v) < 1.0
    assert kinetics.alpha_m(8.0) == pytest.approx(4.25)


def test_e_ca_clamped_at_low_calcium():
    assert kinetics.e_ca(0.0005, 2.0) == 127.95
    assert kinetics.e_ca(2.0, 2.0) == pytest.approx(0.0)
    assert kinetics.e_ca(0.1, 2.0) > kinetics.e_ca(1.0, 2.0)


def test_calcium_current_properties():
    assert kinetics.calcium_current(0.0, 0.1, 5.0, 1.0, 0.01, -70.0, 2.0) == 0.0
    reversal = kinetics.e_ca(0.1, 2.0)
    assert kinetics.calcium_current(0.5, 0.1, 5.0, 1.0, 0.01, reversal, 2.0) == pytest.approx(0.0)
    assert kinetics.calcium_current(0.5, 0.1, 5.0, 1.0, 0.01, -70.0, 2.0) > 0.0


def test_ca_tau_zero_at_rest():
    assert kinetics.ca_tau(CA_REST) == pytest.approx(0.0)
    assert kinetics.ca_tau(1.0) < 0.0


def test_h_inf_bounds_and_tau_h():
    value = kinetics.h_inf(0.5, 16.0)
    assert 0.0 < value < 1.0
    assert kinetics.tau_h(0.0) == pytest.approx(0.25 + TAU_O)
    assert kinetics.tau_h(2.0) < kinetics.tau_h(0.5)


def test_noise_zero_for_centred_draws():
    assert kinetics.summed_uniform_noise(_Half(), 3.0) == pytest.approx(0.0)


def test_noise_zero_amplitude():
    assert kinetics.summed_uniform_noise(random.Random(1), 0.0) == 0.0


def test_noise_linear_in_amplitude_and_reproducible():
    one = kinetics.summed_uniform_noise(random.Random(5), 1.0)
    two = kinetics.summed_uniform_noise(random.Random(5), 2.0)
    assert two == pytest.approx(2 * one)
    assert kinetics.summed_uniform_noise(random.Random(5), 1.0) == one


class _Half:
    def random(self):
        return 0.5