import pytest

from astroleaf.experiment.simulation import build_network, main, run

PARAMETERS = (
    "nAstroParts = 2\n"
    "nLeafs = 2\n"
    "d_IP3 = 0.1\n"
    "d_Ca = 0.05\n"
    "Rcell = 1\n"
    "Rcell2 = 0.5\n"
    "g_Ca = 0.001\n"
    "V_m = -70\n"
    "Ca_ext = 2\n"
    "A_noise = 0\n"
    "A_noiseIP3 = 0\n"
    "A_noise_leaf = 0\n"
    "Simulation parameters\n"
    "dt = 0.125\n"
    "T = 0.5\n"
    "seed = 7\n"
)


@pytest.fixture
def input_dir(tmp_path):
    directory = tmp_path / "input"
    directory.mkdir()
    (directory / "in.txt").write_text(PARAMETERS)
    (directory / "astroPartsConnections.txt").write_text("1 1\n1 0\n")
    (directory / "leaf2astroPartConnections.txt").write_text("1\t0\n1\t1\n")
    (directory / "leafsConnections.txt").write_text("1 1\n1 0\n")
    return directory


def test_build_network_links_leaves_to_parts(input_dir):
    network = build_network(input_dir)
    assert network.settings.n_steps == 4
    assert [leaf.astro_part for leaf in network.leaves] == [0, 1]
    assert [leaf.neighbours for leaf in network.leaves] == [(1,), (0,)]
    assert [part.leaves for part in network.astrocyte.parts] == [(0,), (1,)]
    assert [part.neighbours for part in network.astrocyte.parts] == [(1,), (0,)]


def test_run_writes_one_line_per_step(input_dir, tmp_path):
    out = tmp_path / "out"
    final = run(input_dir, out)
    for part, q in enumerate(final):
        lines = (out / f"q_astroPart{part}.txt").read_text().splitlines()
        assert len(lines) == 4
        times = [line.split("\t")[0] for line in lines]
        assert times == ["0", "0.125", "0.25", "0.375"]
        assert lines[-1].split("\t")[1] == f"{q:.6g}"


def test_run_without_noise_is_reproducible(input_dir, tmp_path):
    first = run(input_dir, tmp_path / "a")
    second = run(input_dir, tmp_path / "b")
    assert first == second
    assert first[0] == pytest.approx(first[1])


def test_progress_reported_on_first_step(input_dir, tmp_path):
    reports = []
    run(input_dir, tmp_path / "out", progress=reports.append)
    assert reports == [0]


def test_main_succeeds_on_valid_input(input_dir, tmp_path):
    out = tmp_path / "out"
    assert main(["--input", str(input_dir), "--output", str(out)]) == 0
    assert (out / "q_astroPart1.txt").exists()


def test_main_reports_missing_input(tmp_path, capsys):
    code = main(["--input", str(tmp_path / "missing"), "--output", str(tmp_path / "out")])
    assert code == 1
    assert "error" in capsys.readouterr().err


def test_truncated_leaf_links_rejected(input_dir):
    (input_dir / "leaf2astroPartConnections.txt").write_text("2 0\n")
    with pytest.raises(ValueError):
        build_network(input_dir)