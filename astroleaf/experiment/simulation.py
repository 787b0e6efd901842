"""Driver of the leaflet experiment: builds the network and integrates it."""

import argparse
import random
import sys
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path

from ..config import (
    InputParameters,
    RunSettings,
    parse_counted_leaf_links,
    parse_leaf_neighbours,
    parse_part_connections,
    read_run_settings,
)
from ..constants import RK_STAGE_OFFSETS
from .astrocyte import Astrocyte
from .leaf import Leaf, owning_part

PARAMETERS_FILE = "in.txt"
PART_LINKS_FILE = "astroPartsConnections.txt"
LEAF_LINKS_FILE = "leaf2astroPartConnections.txt"
LEAF_NEIGHBOURS_FILE = "leafsConnections.txt"

_PROGRESS_EVERY = 10000


@dataclass
class Network:
    """An astrocyte with its leaflets, ready to be integrated."""

    settings: RunSettings
    astrocyte: Astrocyte
    leaves: list


def _all_leaf_records(text):
    """Parse every counted leaflet list in ``text`` up to its end."""
    tokens = iter(text.split())
    records = []
    for token in tokens:
        count = int(token)
        members = []
        for _ in range(count):
            member = next(tokens, None)
            if member is None:
                raise ValueError("leaflet link data ends inside a record")
            members.append(int(member))
        records.append(tuple(members))
    return records


def build_network(input_dir):
    """Read the input files and build the leaflets and the astrocyte."""
    input_dir = Path(input_dir)
    params = InputParameters.load(input_dir / PARAMETERS_FILE)
    settings = read_run_settings(params)

    leaf_links_text = (input_dir / LEAF_LINKS_FILE).read_text()
    neighbours_text = (input_dir / LEAF_NEIGHBOURS_FILE).read_text()
    records = _all_leaf_records(leaf_links_text)
    rng = random.Random()
    leaves = [
        Leaf(
            index,
            params,
            parse_leaf_neighbours(neighbours_text, index),
            owning_part(records, index),
            rng,
        )
        for index in range(settings.n_leaves)
    ]

    part_links = parse_part_connections(
        (input_dir / PART_LINKS_FILE).read_text(), settings.n_astro_parts
    )
    leaf_links = parse_counted_leaf_links(leaf_links_text, settings.n_astro_parts)
    astrocyte = Astrocyte(params, part_links, leaf_links, leaves)
    return Network(settings, astrocyte, leaves)


def run(input_dir, output_dir, progress=None):
    """Integrate the model, writing each part's calcium trace; return the final calcium."""
    output_dir = Path(output_dir)
    network = build_network(input_dir)
    settings = network.settings
    astrocyte = network.astrocyte
    leaves = network.leaves
    n_parts = len(astrocyte.parts)
    n_steps = settings.n_steps

    output_dir.mkdir(parents=True, exist_ok=True)
    with ExitStack() as stack:
        outputs = [
            stack.enter_context(open(output_dir / f"q_astroPart{part}.txt", "w"))
            for part in range(n_parts)
        ]
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
                out.write(f"{time:.6g}\t{cell.q:.6g}\n")
            if progress is not None and step % _PROGRESS_EVERY == 0:
                progress((n_steps - step) // _PROGRESS_EVERY)

    return [cell.q for cell in astrocyte.parts]


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="astroleaf-experiment",
        description="Simulate astrocyte calcium with noisy IP3 production and leaflets.",
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