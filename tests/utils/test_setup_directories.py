from pathlib import Path

import pytest

from deltagam.setup_directories import setup_output_directories, get_table_path, get_plot_path

pytestmark = pytest.mark.unit


def test_setup_output_directories_creates_all(tmp_path):
    dirs = setup_output_directories(tmp_path)

    assert set(dirs.keys()) == {"base", "tables", "plots", "logs"}

    for path in dirs.values():
        assert isinstance(path, Path)
        assert path.exists()
        assert path.is_dir()


def test_setup_output_directories_is_idempotent(tmp_path):
    dirs1 = setup_output_directories(tmp_path)
    dirs2 = setup_output_directories(tmp_path)

    assert dirs1 == dirs2


def test_default_base_is_output_in_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    dirs = setup_output_directories()

    assert dirs["base"] == (tmp_path / "output").resolve()


def test_table_and_plot_paths_carry_tag(tmp_path):
    dirs = setup_output_directories(tmp_path)

    assert get_table_path(dirs, "predictions", "linear") == dirs["tables"] / "predictions_linear.csv"
    assert get_table_path(dirs, "summary", "linear", suffix="json").name == "summary_linear.json"
    assert get_plot_path(dirs, "residuals", "additive_spatial", "pdf") == \
        dirs["plots"] / "residuals_additive_spatial.pdf"
