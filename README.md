# astroleaf

Simulations of calcium (Ca²⁺) and IP3 dynamics in an astrocyte split into
compartments ("parts") that are coupled by diffusion, together with thin
peripheral processes ("leaflets"). Every part carries IP3 (`p`), cytosolic
calcium (`q`), the IP3-receptor gating variable (`z`) and a calcium-channel
gating variable (`n`); every leaflet carries calcium, sodium, an inactivation
variable and its own channel gating variable. The system is integrated with a
fourth-order Runge-Kutta scheme, with channel noise drawn at every stage.

Two models are provided:

* **noradrenaline** – IP3 production in every part is driven by a stimulus
  profile read from `in_IP3st.txt` and replayed every 200 time units. Each
  part may receive calcium influx from at most one leaflet.
* **experiment** – IP3 production carries noise on a fixed set of parts
  (a second noise source is added on parts 0, 9, 23 and 38). A part may be
  linked to several leaflets, but leaflet calcium does not enter the part
  equations in this model.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Running a simulation

Each model has its own command:

```
astroleaf-noradrenaline [--input DIR] [--output DIR]
astroleaf-experiment [--input DIR] [--output DIR]
```

`--input` defaults to `input` and `--output` to `output`, both relative to
the working directory; the output directory is created if it is missing.
While running, the command prints a countdown of the remaining steps in units
of 10 000. If an input file is missing or malformed the command prints
`error: ...` to standard error and exits with status 1.

### Input files

* `in.txt` – model parameters. Each value follows an `=` sign and values are
  taken by position. A line containing `Simulation parameters` splits the
  file into a header and a simulation section.
  * Header, in order: number of parts, number of leaflets, IP3 diffusion
    coefficient, calcium diffusion coefficient, part radius, leaflet radius,
    calcium conductance, membrane potential, external calcium, then the
    noise amplitudes. In the noradrenaline model these are the part channel
    noise (value 10) and the leaflet channel noise (value 11); in the
    experiment model the part channel noise (10), the IP3 noise (11) and the
    leaflet channel noise (12).
  * Simulation section, in order: time step (must be positive), simulated
    duration, random seed.
* `astroPartsConnections.txt` – for every part, the number of neighbouring
  parts followed by their indices.
* `leaf2astroPartConnections.txt` – which leaflets feed each part.
  * noradrenaline: for every part a flag (`0` or non-zero), followed by one
    leaflet index when the flag is set. A leaflet is attached to the first
    line that contains `1`, a tab and the leaflet's index.
  * experiment: for every part a count followed by that many leaflet
    indices. A leaflet belongs to the last part that lists it.
* `leafsConnections.txt` – line `i` holds, for leaflet `i`, the number of
  neighbouring leaflets followed by their indices.
* `in_IP3st.txt` (noradrenaline only) – IP3 drive values. At the start of
  each 200-unit period the file is read again and one value is used per step
  up to 81.98 units into the period; at exactly 81.99 units the drive returns
  to 0.28. The period boundaries are matched by exact time equality, so the
  time step should land on them.

### Output files

* `q_astroPart<i>.txt` – time and cytosolic calcium of part `<i>`, one
  tab-separated line per step (12 significant digits in the noradrenaline
  model, 6 in the experiment model).
* `IP3st.txt` (noradrenaline only) – time and the IP3 drive applied to
  part 0, one line per step.

## Using the library

* `astroleaf.constants` – model constants, the Runge-Kutta stage offsets and
  weights, and the `FrequencyType` and `AmplitudeType` enumerations.
* `astroleaf.kinetics` – the rate functions: `jplc`, `m_fun`, `n_fun`,
  `ca_er`, `j_channel`, `j_pump`, `j_leak`, `j_in`, `j_out`, `q2`, `h_fun`,
  `tn`, `alpha_m`, `beta_m`, `m_inf`, `tau_inf`, `e_ca`, `calcium_current`,
  `ca_tau`, `h_inf`, `tau_h` and `summed_uniform_noise`.
* `astroleaf.impulse.Impulse` – a train of rectangular pulses, periodic or
  with exponentially distributed gaps; `create_impulse(time, change_allowed)`
  returns the pulse value at a time.
* `astroleaf.config` – `InputParameters` (`from_text`, `load`,
  `header_value`, `simulation_value`), `RunSettings` and
  `read_run_settings`, and the parsers `parse_part_connections`,
  `parse_flagged_leaf_links`, `parse_counted_leaf_links` and
  `parse_leaf_neighbours`.
* `astroleaf.noradrenaline` and `astroleaf.experiment` – each has `leaf`
  (`Leaf`), `astrocyte` (`AstroPart`, `Astrocyte`) and `simulation` modules.
  `Leaf.runge_kutta_step(stage, time)` and
  `Astrocyte.runge_kutta_step(part, stage, time)` evaluate one stage;
  `save_state` closes a step. `simulation.run(input_dir, output_dir,
  progress=None)` integrates the whole model and returns the final calcium
  of every part. `build_network` returns the assembled network; in the
  noradrenaline model it takes the output directory as well and is a context
  manager that closes the `IP3st.txt` trace.

## Limits

* Leaflet channel noise is drawn from an unseeded generator, so runs are not
  exactly reproducible even with the same seed.
* Every leaflet and part carries an `Impulse`, but its pulses are not fed
  into the model equations.
* Parts and leaflets are integrated one after another in a single thread.
* Results are written as plain text only; there is no plotting.