"""Test the multiway command-line interface end to end."""

import logging

import pandas as pd
import pulp
import pytest
from typer.testing import CliRunner

from multiway import __version__
from multiway.app import app
from multiway.registry import SOLVER_ADAPTER_REGISTRY, register_solver_adapter
from tests.utils.stubs import ScriptedSolver, one_hot_values

runner = CliRunner()


@pytest.fixture(autouse=True)
def _cli_environment(monkeypatch):
    """Pin the solver to CBC and restore the root handlers the CLI replaces."""
    monkeypatch.setenv("MULTIWAY_SOLVER", "cbc")
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def sizes_csv(tmp_path):
    path = tmp_path / "species.csv"
    path.write_text(
        "species,n_individuals,endemic\n"
        "oak,1,1\n"
        "ash,1,0\n"
        "elm,1,1\n"
        "yew,3,0\n"
        "fir,2,1\n"
        "box,1,0\n"
    )
    return path


def _invoke(args):
    result = runner.invoke(app, args)
    if result.exit_code != 0:
        print(f"OUTPUT: {result.output}")
        print(f"Exception: {result.exception}")
    return result


def test_partition_writes_group_column(sizes_csv, tmp_path):
    output = tmp_path / "out" / "groups.csv"

    result = _invoke(
        [
            "partition",
            str(sizes_csv),
            "--size-column",
            "n_individuals",
            "--groups",
            "3",
            "--output",
            str(output),
        ]
    )

    assert result.exit_code == 0
    frame = pd.read_csv(output)
    assert frame["species"].tolist() == ["oak", "ash", "elm", "yew", "fir", "box"]
    assert frame.groupby("Group")["n_individuals"].sum().tolist() == [3, 3, 3]


def test_partition_prints_group_table(sizes_csv):
    result = _invoke(
        ["partition", str(sizes_csv), "-s", "n_individuals", "-k", "2", "--objective", "max_smallest"]
    )

    assert result.exit_code == 0
    assert "max-smallest" in result.output
    assert "Group" in result.output


def test_partition_json_output_quiet(sizes_csv, tmp_path):
    output = tmp_path / "groups.json"

    result = _invoke(
        ["partition", str(sizes_csv), "-s", "n_individuals", "-k", "3", "-o", str(output), "-q"]
    )

    assert result.exit_code == 0
    frame = pd.read_json(output, orient="records")
    assert set(frame["Group"]) == {1, 2, 3}


def test_partition_with_config_file(sizes_csv, tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("objective: min-largest\nsolver: cbc\ntime_limit: 30\n")

    result = _invoke(
        ["partition", str(sizes_csv), "-s", "n_individuals", "-k", "3", "-c", str(config)]
    )

    assert result.exit_code == 0
    assert "min-largest" in result.output
    assert "Range 0" in result.output


@pytest.fixture
def feasible_only_config(tmp_path, monkeypatch):
    """Config selecting an adapter whose solver never proves optimality."""

    @register_solver_adapter("feasible-only")
    class FeasibleOnlyAdapter:
        def get_pulp_solver(self, params):
            return ScriptedSolver(
                status=pulp.LpStatusOptimal,
                sol_status=pulp.LpSolutionIntegerFeasible,
                values=one_hot_values([1, 1, 1, 2, 3, 3], 3),
            )

        @property
        def name(self):
            return "Feasible only"

        @property
        def available(self):
            return True

    monkeypatch.delenv("MULTIWAY_SOLVER", raising=False)
    config = tmp_path / "config.yaml"
    config.write_text("strict: false\nsolver: feasible-only\n")
    yield config
    del SOLVER_ADAPTER_REGISTRY["feasible-only"]


def test_partition_strict_flag_defaults_to_config(sizes_csv, feasible_only_config, tmp_path):
    output = tmp_path / "groups.csv"

    result = _invoke(
        [
            "partition",
            str(sizes_csv),
            "-s",
            "n_individuals",
            "-k",
            "3",
            "-c",
            str(feasible_only_config),
            "-o",
            str(output),
        ]
    )

    assert result.exit_code == 0
    assert "Feasible only" in result.output
    assert pd.read_csv(output)["Group"].tolist() == [1, 1, 1, 2, 3, 3]


def test_partition_strict_flag_overrides_config(sizes_csv, feasible_only_config):
    result = _invoke(
        [
            "partition",
            str(sizes_csv),
            "-s",
            "n_individuals",
            "-k",
            "3",
            "-c",
            str(feasible_only_config),
            "--strict",
        ]
    )

    assert result.exit_code == 1


def test_partition_missing_input(tmp_path):
    result = _invoke(
        ["partition", str(tmp_path / "missing.csv"), "-s", "n_individuals", "-k", "2"]
    )

    assert result.exit_code == 1


def test_partition_unknown_objective(sizes_csv):
    result = _invoke(
        ["partition", str(sizes_csv), "-s", "n_individuals", "-k", "2", "--objective", "median"]
    )

    assert result.exit_code == 1


def test_partition_missing_column(sizes_csv):
    result = _invoke(["partition", str(sizes_csv), "-s", "n_trees", "-k", "2"])

    assert result.exit_code == 1


def test_partition_invalid_config(sizes_csv, tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("objective: median\n")

    result = _invoke(
        ["partition", str(sizes_csv), "-s", "n_individuals", "-k", "2", "-c", str(config)]
    )

    assert result.exit_code == 1


def test_partition_labels_without_cuts_fail(sizes_csv):
    result = _invoke(
        [
            "partition",
            str(sizes_csv),
            "-s",
            "n_individuals",
            "-k",
            "2",
            "-l",
            "endemic",
            "--alpha",
            "0.5",
        ]
    )

    assert result.exit_code == 1


def test_partition_labels_with_cuts(sizes_csv, tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("entropy_cuts: 6\n")
    output = tmp_path / "groups.csv"

    result = _invoke(
        [
            "partition",
            str(sizes_csv),
            "-s",
            "n_individuals",
            "-k",
            "3",
            "-l",
            "endemic",
            "--alpha",
            "0.1",
            "-c",
            str(config),
            "-o",
            str(output),
        ]
    )

    assert result.exit_code == 0
    frame = pd.read_csv(output)
    assert frame.groupby("Group")["n_individuals"].sum().tolist() == [3, 3, 3]


def test_compare_prints_table(sizes_csv):
    result = _invoke(
        ["compare", str(sizes_csv), "-s", "n_individuals", "-k", "3", "--baselines", "1", "-q"]
    )

    assert result.exit_code == 0
    assert "Group sums by algorithm" in result.output
    assert "random-1" in result.output
    assert "range" in result.output


def test_compare_without_baselines(sizes_csv):
    result = _invoke(
        ["compare", str(sizes_csv), "-s", "n_individuals", "-k", "2", "--baselines", "0"]
    )

    assert result.exit_code == 0
    assert "random-1" not in result.output


def test_compare_missing_column(sizes_csv):
    result = _invoke(["compare", str(sizes_csv), "-s", "n_trees", "-k", "2"])

    assert result.exit_code == 1


def test_version():
    result = _invoke(["version"])

    assert result.exit_code == 0
    assert f"multiway {__version__}" in result.output
