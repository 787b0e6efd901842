"""Driver of the noradrenaline model: builds the network and integrates it."""

import argparse
import random
import sys
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from ..config import (
    InputParameters,
    RunSettings,
    parse_flagged_leaf_links,
    parse_leaf_neighbours,
    parse_part_connections,
    read_run_settings,
)
from ..constants import RK_STAGE_OFFSETS
from .astrocyte import Astrocyte
from .leaf import Leaf, find_connected_part

PARAMETERS_FILE = "in.txt"
PART_LINKS_FILE = "astroPartsConnections.txt"
LEAF_LINKS_FILE = "leaf2astroPartConnections.txt"
LEAF_NEIGHBOURS_FILE = "leafsConnections.txt"
STIMULUS_FILE = "in_IP3st.txt"
TRACE_FILE = "IP3st.txt"

_PROGRESS_EVERY = 10000


@dataclass
class Network:
    """An astrocyte with its leaflets, ready to be integrated."""

    settings: RunSettings
    astrocyte: Astrocyte
    leaves: list
    trace: TextIO

    def close(self):
        self.trace.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


def build_network(input_dir, output_dir):
    """Read the input files and build the leaflets and the astrocyte."""
    input_dir = Path(input_dir)
    output_dir = Path(output_dir)
    params = InputParameters.load(input_dir / PARAMETERS_FILE)
    settings = read_run_settings(params)

    leaf_links_text = (input_dir / LEAF_LINKS_FILE).read_text()
    neighbours_text = (input_dir / LEAF_NEIGHBOURS_FILE).read_text()
    rng = random.Random()
    leaves = [
        Leaf(
            index,
            params,
            parse_leaf_neighbours(neighbours_text, index),
            find_connected_part(leaf_links_text, index),
            rng,
        )
        for index in range(settings.n_leaves)
    ]

    part_links = parse_part_connections(
        (input_dir / PART_LINKS_FILE).read_text(), settings.n_astro_parts
    )
    leaf_links = parse_flagged_leaf_links(leaf_links_text, settings.n_astro_parts)

    output_dir.mkdir(parents=True, exist_ok=True)
    trace = open(output_dir / TRACE_FILE, "w")
    try:
        astrocyte = Astrocyte(
            params, part_links, leaf_links, leaves, input_dir / STIMULUS_FILE, trace
        )
    except BaseException:
        trace.close()
        raise
    return Network(settings, astrocyte, leaves, trace)


def run(input_dir, output_dir, progress=None):
    """Integrate the model, writing each part's calcium trace; return the final calcium."""
    output_dir = Path(output_dir)
    with build_network(input_dir, output_dir) as network, ExitStack() as stack:
        settings = network.settings
        astrocyte = network.astrocyte
        leaves = network.leaves
        n_parts = len(astrocyte.parts)
        outputs = [
            stack.enter_context(open(output_dir / f"q_astroPart{part}.txt", "w"))
            for part in range(n_parts)
        ]
        n_steps = settings.n_steps

        for step in range(n_steps):
            time = step * settings.time_step
            for stage in range(len(RK_STAGE_OFFSETS)):
                for part in range(n_parts):
                    astrocyte.runge_kutta_step(part, stage, time)
                for leaf in leaves:
                    leaf.runge_kutta_step(stage, time)
            for part in range(n_parts):
                astrocyte.save_state(part)
            for leaf in leaves:
                leaf.save_state()
            for cell, out in zip(astrocyte.parts, outputs):
                out.write(f"{time:.12g}\t{cell.q:.12g}\n")
            if progress is not None and step % _PROGRESS_EVERY == 0:
                progress((n_steps - step) // _PROGRESS_EVERY)

        return [cell.q for cell in astrocyte.parts]


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="astroleaf-noradrenaline",
        description="Simulate astrocyte calcium driven by an IP3 stimulus.",
    )
    parser.add_argument("--input", type=Path, default=Path("input"), help="input directory")
    parser.add_argument("--output", type=Path, default=Path("output"), help="output directory")
    args = parser.parse_args(argv)
    try:
        run(args.input, args.output, progress=lambda remaining: print(remaining, flush=True))
    except (OSError, ValueError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    return 0