"""Reading the parameter and connection files of a simulation."""

import math
import re
from dataclasses import dataclass
from pathlib import Path

SECTION_MARKER = "Simulation parameters"

_VALUE = re.compile(r"=\s*(\S+)")
_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def _number(token, where):
    match = _NUMBER.match(token)
    if match is None:
        raise ValueError(f"{where}: {token!r} is not a number")
    return float(match.group())


@dataclass(frozen=True)
class InputParameters:
    """Values found after each '=' of a parameter file, split into two sections.

    The header section holds everything before the line naming the simulation
    parameters; the simulation section holds everything after it.
    """

    header: tuple
    simulation: tuple

    @classmethod
    def from_text(cls, text):
        lines = text.splitlines(keepends=True)
        for marker_line, line in enumerate(lines):
            if SECTION_MARKER in line:
                break
        else:
            raise ValueError(f"parameter text has no {SECTION_MARKER!r} line")
        header = "".join(lines[:marker_line])
        simulation = "".join(lines[marker_line + 1:])
        return cls(tuple(_VALUE.findall(header)), tuple(_VALUE.findall(simulation)))

    @classmethod
    def load(cls, path):
        return cls.from_text(Path(path).read_text())

    @staticmethod
    def _pick(values, position, section):
        if not 0 <= position < len(values):
            raise ValueError(f"{section} section has no value number {position}")
        return _number(values[position], f"{section} value {position}")

    def header_value(self, position):
        """Return the numeric value after the given '=' of the header section."""
        return self._pick(self.header, position, "header")

    def simulation_value(self, position):
        """Return the numeric value after the given '=' of the simulation section."""
        return self._pick(self.simulation, position, "simulation")


@dataclass(frozen=True)
class RunSettings:
    """Network size and time grid of a run."""

    n_astro_parts: int
    n_leaves: int
    time_step: float
    duration: float

    @property
    def n_steps(self):
        return math.ceil(self.duration / self.time_step)


def read_run_settings(params):
    """Extract the network size and time grid from the parameters."""
    time_step = params.simulation_value(0)
    if time_step <= 0:
        raise ValueError("time step must be positive")
    return RunSettings(
        n_astro_parts=int(params.header_value(0)),
        n_leaves=int(params.header_value(1)),
        time_step=time_step,
        duration=params.simulation_value(1),
    )


def _take(tokens, what):
    token = next(tokens, None)
    if token is None:
        raise ValueError(f"connection data ends before {what}")
    return int(token)


def _take_count(tokens, what):
    count = _take(tokens, what)
    if count < 0:
        raise ValueError(f"negative count for {what}")
    return count


def _counted_lists(text, n_parts):
    tokens = iter(text.split())
    result = []
    for part in range(n_parts):
        count = _take_count(tokens, f"entry {part}")
        result.append(tuple(_take(tokens, f"entry {part}") for _ in range(count)))
    return result


def parse_part_connections(text, n_parts):
    """Parse, for each part, a count followed by the indices of its neighbours."""
    return _counted_lists(text, n_parts)


def parse_flagged_leaf_links(text, n_parts):
    """Parse, for each part, a flag and, when it is set, the index of its leaflet."""
    tokens = iter(text.split())
    links = []
    for part in range(n_parts):
        flag = _take(tokens, f"flag of part {part}")
        links.append(_take(tokens, f"leaflet of part {part}") if flag != 0 else None)
    return links


def parse_counted_leaf_links(text, n_parts):
    """Parse, for each part, a count followed by the indices of its leaflets."""
    return _counted_lists(text, n_parts)


def parse_leaf_neighbours(text, index):
    """Return the neighbours of leaflet ``index``: the counted list after ``index`` lines."""
    rest = "\n".join(text.split("\n")[index:])
    tokens = iter(rest.split())
    count = _take_count(tokens, f"neighbours of leaflet {index}")
    return tuple(_take(tokens, f"neighbours of leaflet {index}") for _ in range(count))