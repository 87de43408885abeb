import json
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from snapvars import Dataset, DatasetKind, getvar
from snapvars.config import EngineConfig, load_engine_config, load_snapshot_info
from snapvars.core.exceptions import ConfigError
from snapvars.core.units import PhysicalConstants

KPC_CM = PhysicalConstants().kpc


def _write(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload))
    return path


def test_load_snapshot_info(tmp_path):
    path = _write(
        tmp_path / "info.json",
        {
            "unit_l": KPC_CM,
            "unit_d": 6.77e-23,
            "unit_t": 3.08e15,
            "gamma": 1.4,
            "time": 0.25,
            "boxlen": 48.0,
            "levelmin": 3,
            "levelmax": 10,
        },
    )

    info, extent = load_snapshot_info(path)

    assert info.gamma == 1.4
    assert info.time == 0.25
    assert info.scale["kpc"] == pytest.approx(1.0)
    assert info.scale["standard"] == 1.0
    assert extent.boxlen == 48.0
    assert (extent.levelmin, extent.levelmax) == (3, 10)


def test_load_snapshot_info_defaults(tmp_path):
    path = _write(tmp_path / "info.json", {"unit_l": 1.0, "unit_d": 1.0, "unit_t": 1.0, "levelmin": 5})

    info, extent = load_snapshot_info(path)

    assert info.gamma == pytest.approx(5.0 / 3.0)
    assert info.time == 0.0
    assert extent.boxlen == 1.0
    assert extent.levelmax == 5


def test_load_snapshot_info_relative_to_config_root(tmp_path, monkeypatch):
    _write(tmp_path / "info.json", {"unit_l": 2.0, "unit_d": 1.0, "unit_t": 1.0})
    monkeypatch.setenv("SNAPVARS_CONFIG_ROOT", str(tmp_path))

    info, _ = load_snapshot_info("info.json")

    assert info.unit_l == 2.0


def test_missing_units(tmp_path):
    path = _write(tmp_path / "info.json", {"unit_l": 1.0})
    with pytest.raises(ConfigError, match="unit_d"):
        load_snapshot_info(path)


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_snapshot_info(tmp_path / "absent.json")


def test_malformed_json(tmp_path):
    path = tmp_path / "info.json"
    path.write_text("{unit_l: 1")
    with pytest.raises(ConfigError, match="Malformed JSON"):
        load_snapshot_info(path)


def test_non_object_json(tmp_path):
    path = _write(tmp_path / "info.json", [1, 2, 3])
    with pytest.raises(ConfigError, match="JSON object"):
        load_snapshot_info(path)


def test_bad_values(tmp_path):
    path = _write(tmp_path / "info.json", {"unit_l": "far", "unit_d": 1.0, "unit_t": 1.0})
    with pytest.raises(ConfigError, match="Invalid value"):
        load_snapshot_info(path)


def test_inverted_level_range(tmp_path):
    path = _write(
        tmp_path / "info.json",
        {"unit_l": 1.0, "unit_d": 1.0, "unit_t": 1.0, "levelmin": 6, "levelmax": 4},
    )
    with pytest.raises(ConfigError, match="levelmax"):
        load_snapshot_info(path)


def test_engine_config_defaults_without_file(tmp_path):
    assert load_engine_config(tmp_path) == EngineConfig()


def test_engine_config_from_file(tmp_path):
    _write(
        tmp_path / "snapvars.json",
        {
            "default_direction": "y",
            "default_center": ["bc", 0.25, 0.5],
            "log_format": "plain",
        },
    )

    cfg = load_engine_config(tmp_path)

    assert cfg.default_direction == "y"
    assert cfg.default_center == ("bc", 0.25, 0.5)
    assert cfg.log_format == "plain"


def test_engine_config_bad_direction(tmp_path):
    _write(tmp_path / "snapvars.json", {"default_direction": "w"})
    with pytest.raises(ConfigError, match="default_direction"):
        load_engine_config(tmp_path)


def test_engine_config_box_center_symbol(tmp_path):
    _write(tmp_path / "snapvars.json", {"default_center": "bc"})

    cfg = load_engine_config(tmp_path)

    assert cfg.default_center == ("bc",)
    cells = Dataset(
        pd.DataFrame({"level": [1, 1], "cx": [1, 2], "cy": [1, 1], "cz": [1, 1]}),
        DatasetKind.CELL,
        boxlen=2.0,
    )
    np.testing.assert_allclose(getvar(cells, "r_sphere", config=cfg), [0.0, 1.0])


@pytest.mark.parametrize("center", [[0.5, 0.5], ["bc", "middle", 0.5], 3])
def test_engine_config_bad_center(tmp_path, center):
    _write(tmp_path / "snapvars.json", {"default_center": center})
    with pytest.raises(ConfigError):
        load_engine_config(tmp_path)
