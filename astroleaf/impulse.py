"""Rectangular stimulus impulses, either periodic or Poisson-spaced."""

import math
import random

from .constants import AmplitudeType, FrequencyType


class Impulse:
    """Generator of a train of rectangular impulses sampled at given times."""

    def __init__(
        self,
        amplitude,
        duration,
        start_time,
        frequency,
        quantity,
        freq_type,
        amp_type,
        min_amp,
        max_amp,
        time_step,
        seed,
        amplitude_rng=None,
    ):
        self.amplitude = float(amplitude)
        self.duration = float(duration)
        self.first_start_time = float(start_time)
        self.frequency = float(frequency)
        self.period = math.inf if frequency == 0 else 1.0 / frequency
        self.quantity = int(quantity)
        self.freq_type = FrequencyType(freq_type)
        self.amp_type = AmplitudeType(amp_type)
        self.min_amp = float(min_amp)
        self.max_amp = float(max_amp)
        self.time_step = float(time_step)
        self.active = False
        self.start_time = self.first_start_time
        self._amplitude_rng = amplitude_rng if amplitude_rng is not None else random.Random()
        self._interval_rng = None
        self._rate = 0.0

        if self.freq_type is FrequencyType.POISSON:
            mean_gap = self.period - self.duration
            if not mean_gap > 0:
                raise ValueError("impulse period must exceed impulse duration for Poisson spacing")
            self._rate = 1.0 / mean_gap
            self._interval_rng = random.Random(seed)

    def _choose_amplitude(self):
        if self.amp_type is AmplitudeType.RAND_UNIFORM:
            span = self.max_amp - self.min_amp
            self.amplitude = span * self._amplitude_rng.random() + self.min_amp

    def _in_scheduled_window(self, time):
        if self.quantity <= 0:
            return False
        offset = time - self.first_start_time
        lowest = max(0, math.floor((offset - self.duration) / self.period) - 1)
        highest = min(self.quantity - 1, math.floor(offset / self.period) + 1)
        for i in range(lowest, highest + 1):
            begin = self.first_start_time + i * self.period
            if begin <= time < begin + self.duration:
                return True
        return False

    def _poisson(self, time, change_allowed):
        if not self.active:
            if change_allowed and time >= self.first_start_time:
                gap = self._interval_rng.expovariate(self._rate) + self.duration
                self.start_time += gap
                self.active = True
                self._choose_amplitude()
            return 0.0
        elapsed = time - self.start_time
        if time >= self.start_time and elapsed <= self.duration:
            return self.amplitude
        if elapsed > self.duration and change_allowed:
            self.active = False
        return 0.0

    def _periodic(self, time, change_allowed):
        if not self.active:
            if change_allowed and time >= self.first_start_time and self._in_scheduled_window(time):
                self.active = True
                self._choose_amplitude()
                self.start_time = time
                return self.amplitude
            return 0.0
        if self.start_time <= time < self.start_time + self.duration:
            return self.amplitude
        if change_allowed:
            self.active = False
        return 0.0

    def create_impulse(self, time, change_allowed):
        """Return the stimulus value at ``time``, advancing state if allowed."""
        if self.freq_type is FrequencyType.POISSON:
            return self._poisson(time, change_allowed)
        if self.freq_type is FrequencyType.CONST:
            return self._periodic(time, change_allowed)
        return 0.0