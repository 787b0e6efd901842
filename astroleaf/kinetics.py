"""Rate functions of the astrocyte calcium and leaflet models."""

import math

from .constants import (
    A2,
    ALF,
    C0,
    CA_REST,
    D1,
    D2,
    D3,
    D5,
    HCA,
    HNA,
    HTAU,
    K_1,
    K_2,
    K_3,
    K_4,
    KCA,
    KNA,
    KTAU,
    TAU_CA,
    TAU_O,
    V1,
    V2,
    V3,
    V4,
    V6,
)

_FARADAY = 96485.0
_NOISE_TERMS = 10


def jplc(q):
    """IP3 production by phospholipase C."""
    return V4 * ((q + (1.0 - ALF) * K_4) / (q + K_4))


def m_fun(p):
    """IP3 activation of the IP3 receptor."""
    return p / (p + D1)


def n_fun(q):
    """Calcium activation of the IP3 receptor."""
    return q / (q + D5)


def ca_er(q, c1):
    """Calcium concentration in the endoplasmic reticulum."""
    return C0 - q / (c1 * c1)


def j_channel(p, q, z, c1):
    """Calcium flux through IP3 receptor channels."""
    return V1 * m_fun(p) ** 3 * n_fun(q) ** 3 * z ** 3 * (ca_er(q, c1) - q)


def j_pump(q):
    """SERCA pump flux."""
    return V3 * q ** 2 / (q ** 2 + K_3 ** 2)


def j_leak(q, c1):
    """Passive leak from the endoplasmic reticulum."""
    return V2 * (ca_er(q, c1) - q)


def j_in(p):
    """Calcium influx driven by IP3."""
    return V6 * (p ** 2 / (K_2 ** 2 + p ** 2))


def j_out(q):
    """Calcium efflux through the membrane."""
    return K_1 * q


def q2(p):
    return D2 * ((p + D1) / (p + D3))


def h_fun(p, q):
    """Steady state of the inactivation gate."""
    return q2(p) / (q2(p) + q)


def tn(p, q):
    """Time constant of the inactivation gate."""
    return 1.0 / (A2 * (q2(p) + q))


def alpha_m(v_m):
    return 8.5 / (1.0 + math.exp(-(v_m - 8.0) / 12.5))


def beta_m(v_m):
    return 35.0 / (1.0 + math.exp((v_m + 74.0) / 14.5))


def m_inf(v_m):
    """Steady-state open fraction of voltage-gated calcium channels."""
    return alpha_m(v_m) / (alpha_m(v_m) + beta_m(v_m))


def tau_inf(v_m):
    """Relaxation time of voltage-gated calcium channels."""
    return 1.0 / (alpha_m(v_m) + beta_m(v_m))


def e_ca(q, ca_ext):
    """Calcium reversal potential, clamped for very low concentrations."""
    if q > 0.001:
        return 25.84 * 0.5 * math.log(ca_ext / q)
    return 127.95


def calcium_current(n, q, surface, volume, g_ca, v_m, ca_ext):
    """Calcium entry through voltage-gated channels per unit volume."""
    return -10000.0 * surface * g_ca * n * (v_m - e_ca(q, ca_ext)) / (2.0 * _FARADAY * volume)


def ca_tau(q):
    """Relaxation of calcium towards its resting level."""
    return (CA_REST - q) / TAU_CA


def h_inf(ca, na):
    """Steady state of the leaflet gate as a function of calcium and sodium."""
    return 1.0 - (1.0 / (1.0 + (ca / KCA) ** HCA)) * (1.0 / (1.0 + (KNA / na) ** HNA))


def tau_h(ca):
    """Time constant of the leaflet gate."""
    return 0.25 + TAU_O / (1.0 + (ca / KTAU) ** HTAU)


def summed_uniform_noise(rng, amplitude):
    """Approximately normal noise built from a sum of uniform draws."""
    total = sum(rng.random() for _ in range(_NOISE_TERMS))
    centred = total - 0.5 * _NOISE_TERMS
    return amplitude * centred / math.sqrt(_NOISE_TERMS / 12.0)