import json

import numpy as np
import pytest

from pipeheattransfer.controller.component import PipeReport
from pipeheattransfer.model.environment import EnvironmentKind
from pipeheattransfer.model.io import ResultsRecorder, load_pipe_configs, save_pipe_configs


def test_pipe_configs_json(tmp_path, outdoor_config, buried_config):
    path = tmp_path / "pipes.json"
    save_pipe_configs([outdoor_config, buried_config], path)

    loaded = load_pipe_configs(path)
    assert [c.name for c in loaded] == ["Outdoor Pipe", "Buried Pipe"]
    assert loaded[1] == buried_config


def test_load_plain_list(tmp_path, zone_config):
    path = tmp_path / "pipes.json"
    path.write_text(json.dumps([zone_config.to_dict()]), encoding="utf-8")
    assert load_pipe_configs(path) == [zone_config]


def test_load_rejects_non_list(tmp_path):
    path = tmp_path / "pipes.json"
    path.write_text(json.dumps({"pipes": "nope"}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_pipe_configs(path)


def test_results_recorder_round_trip(tmp_path):
    recorder = ResultsRecorder()
    for i in range(3):
        recorder.record(0.25 * (i + 1), PipeReport(name="P1", kind=EnvironmentKind.ZONE_AIR, outlet_temperature=40.0 + i))
    recorder.record(0.25, PipeReport(name="P2", kind=EnvironmentKind.BURIED_SOIL, soil_iterations=2))

    assert len(recorder) == 4
    np.testing.assert_array_equal(recorder.series("P1", "outlet_temperature"), [40.0, 41.0, 42.0])

    path = tmp_path / "results.h5"
    recorder.save(path)
    results = ResultsRecorder.load(path)

    assert set(results) == {"P1", "P2"}
    np.testing.assert_array_equal(results["P1"]["time"], [0.25, 0.5, 0.75])
    np.testing.assert_array_equal(results["P1"]["outlet_temperature"], [40.0, 41.0, 42.0])
    assert results["P2"]["soil_iterations"][0] == 2.0


def test_load_rejects_non_hdf5(tmp_path):
    path = tmp_path / "results.h5"
    path.write_text("not hdf5", encoding="utf-8")
    with pytest.raises(ValueError):
        ResultsRecorder.load(path)


def test_results_keep_pipe_names_with_slashes(tmp_path):
    recorder = ResultsRecorder()
    recorder.record(0.25, PipeReport(name="Loop A/Supply", kind=EnvironmentKind.OUTDOOR_AIR, outlet_temperature=50.0))
    recorder.record(0.25, PipeReport(name="Loop A_Supply", kind=EnvironmentKind.OUTDOOR_AIR, outlet_temperature=45.0))

    path = tmp_path / "results.h5"
    recorder.save(path)
    results = ResultsRecorder.load(path)

    assert set(results) == {"Loop A/Supply", "Loop A_Supply"}
    np.testing.assert_array_equal(results["Loop A/Supply"]["time"], [0.25])
    assert results["Loop A/Supply"]["outlet_temperature"][0] == 50.0
    assert results["Loop A_Supply"]["outlet_temperature"][0] == 45.0
