import csv
import importlib
import logging
import sys

import pytest

from linksweep.launcher.propagation import UnknownPropagationModelError
from linksweep.scenarios import distance_sweep, runtime_sweep
from linksweep.scenarios.common import configure_logging


def _coordinates(path):
    with path.open(encoding="utf8") as handle:
        return [row[0] for row in list(csv.reader(handle))[1:]]


def test_distance_cli_runs_selected_models(tmp_path, fake_runtime_factory, range_limited, capsys):
    factory = fake_runtime_factory(range_limited(3))
    status = distance_sweep.main(
        ["--output-dir", str(tmp_path), "--models", "Friis", "TwoRayGround"],
        runtime_factory=factory,
    )
    assert status == 0
    assert _coordinates(tmp_path / "output_Friis.csv") == ["1", "2", "3", "4"]
    assert _coordinates(tmp_path / "output_TwoRayGround.csv") == ["1", "2", "3", "4"]
    assert not (tmp_path / "output_Nakagami.csv").exists()
    assert (tmp_path / "flow.xml").exists()
    assert "Friis: 4 runs" in capsys.readouterr().out


def test_distance_cli_rejects_unknown_model(tmp_path, fake_runtime_factory, range_limited):
    factory = fake_runtime_factory(range_limited(3))
    with pytest.raises(UnknownPropagationModelError):
        distance_sweep.main(["--output-dir", str(tmp_path), "--models", "Okumura"], runtime_factory=factory)
    assert factory.history == []


def test_runtime_cli_honours_max_runtime(tmp_path, fake_runtime_factory, range_limited):
    factory = fake_runtime_factory(range_limited(50))
    status = runtime_sweep.main(
        ["--output-dir", str(tmp_path), "--max-runtime", "12", "--quiet"],
        runtime_factory=factory,
    )
    assert status == 0
    assert _coordinates(tmp_path / "output_runtime.csv") == [str(s) for s in range(1, 13)]


def test_log_file_receives_run_context(tmp_path, fake_runtime_factory, range_limited):
    factory = fake_runtime_factory(range_limited(1))
    log_dir = tmp_path / "logs"
    distance_sweep.main(
        ["--output-dir", str(tmp_path), "--models", "Friis", "--log-dir", str(log_dir), "--quiet"],
        runtime_factory=factory,
    )
    for handler in logging.getLogger("linksweep").handlers:
        handler.flush()
    [log_path] = list(log_dir.glob("sweep_*.log"))
    content = log_path.read_text(encoding="utf-8")
    assert "sweep=Friis | coord=2" in content
    assert "Trame reçue" in content


def test_configure_logging_without_file_returns_none():
    assert configure_logging(None, quiet=True) is None
    handlers = logging.getLogger("linksweep").handlers
    assert len(handlers) == 1
    assert handlers[0].level == logging.WARNING


def test_runtime_cli_rejects_max_runtime_below_start(tmp_path, fake_runtime_factory, range_limited):
    factory = fake_runtime_factory(range_limited(50))
    with pytest.raises(ValueError, match="max_s"):
        runtime_sweep.main(["--output-dir", str(tmp_path), "--max-runtime", "0"], runtime_factory=factory)
    assert factory.history == []
    assert not (tmp_path / "output_runtime.csv").exists()


@pytest.mark.parametrize(
    "script, scenario",
    [("run_distance_sweep", distance_sweep), ("run_runtime_sweep", runtime_sweep)],
)
def test_launcher_scripts_expose_scenario_main(script, scenario):
    module = importlib.import_module(f"scripts.{script}")
    assert module.main is scenario.main
    assert str(module.ROOT_DIR) in sys.path


def test_distance_launcher_script_runs_sweep(tmp_path, fake_runtime_factory, range_limited):
    from scripts.run_distance_sweep import main

    factory = fake_runtime_factory(range_limited(2))
    assert main(["--output-dir", str(tmp_path), "--models", "Friis", "--quiet"], runtime_factory=factory) == 0
    assert _coordinates(tmp_path / "output_Friis.csv") == ["1", "2", "3"]
