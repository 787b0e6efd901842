"""Model constants shared by the astrocyte and leaflet models."""

from enum import IntEnum

# Initial values of the state variables.
P0 = 0.16
Q0 = 0.07
Z0 = 0.67
N0 = 0.0
CA_0 = 0.08
NA_0 = 16.0
H_0 = 0.1
N2_0 = 0.0

# Astrocyte parameters.
A2 = 0.14
D1 = 0.13
D2 = 1.049
D3 = 0.9434
D5 = 0.082
V_B = 0.5
K_R = 1.3
K_P = 10.0
K_N = 0.6
K_1 = 0.5
K_2 = 1.0
K_3 = 0.1
K_4 = 1.1
C0 = 20.0
V1 = 6.0
V2 = 0.11
V3 = 20.0
V4 = 0.4
V6 = 0.2
ALF = 0.8
TR = 0.14
P_1 = 0.28

# Leaflet parameters.
CA_REST = 0.075
NA_REST = 16.0
TAU_CA = 2.0
TAU_NA = 6.0
KCA = 0.8
HCA = 2.0
KNA = 5.0
HNA = 2.0
TAU_O = 10.0
KTAU = 1.0
HTAU = 1.0

# Fourth-order Runge-Kutta stage offsets and weights.
RK_STAGE_OFFSETS = (0.0, 0.5, 0.5, 1.0)
RK_STAGE_WEIGHTS = (1.0, 2.0, 2.0, 1.0)


class FrequencyType(IntEnum):
    """How stimulus impulses are spaced in time."""

    POISSON = 0
    CONST = 1
    NEVER = 2


class AmplitudeType(IntEnum):
    """How the amplitude of each stimulus impulse is chosen."""

    CONST = 0
    RAND_UNIFORM = 1


# Input signal parameters of the noradrenaline model.
IMPULSE_AMPLITUDE = 100.0
IMPULSE_DURATION = 0.1
IMPULSE_START_TIME = 0.0
IMPULSE_FREQ = 1.0 / 60.0
IMP_MIN_AMP = -1.5
IMP_MAX_AMP = 1.5
IMPULSES_QUANTITY = 1
FREQ_TYPE = FrequencyType.POISSON
AMP_TYPE = AmplitudeType.CONST

# Input signal parameters of the leaflet experiment.
IMP_DURATION = 0.1
IMP_AMPL = 100.0
IMP_START_TIME = 50.0
IMP_PERIOD = 50.0