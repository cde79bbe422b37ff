import pytest

from opportunity_matcher.config import StoreCfg, build_store, load_config
from opportunity_matcher.errors import InvalidWeightConfiguration
from opportunity_matcher.scoring import ScoringWeights
from opportunity_matcher.store import HttpRecordStore, JsonFileRecordStore, MemoryRecordStore


def _write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_load_config_reads_weights(tmp_path):
    cfg = load_config(_write(tmp_path, "scoring:\n  weights:\n    skill: 0.6\n    tag: 0.4\n"))

    assert cfg.scoring_weights() == ScoringWeights(0.6, 0.4)
    assert cfg.output.top_n == 20


def test_empty_config_uses_defaults(tmp_path):
    cfg = load_config(_write(tmp_path, ""))

    assert cfg.scoring_weights() == ScoringWeights(0.7, 0.3)
    assert cfg.store.kind == "json"


def test_bad_weights_fail_at_load(tmp_path):
    with pytest.raises(InvalidWeightConfiguration):
        load_config(_write(tmp_path, "scoring:\n  weights:\n    skill: 0.7\n    tag: 0.7\n"))


def test_non_mapping_config_is_rejected(tmp_path):
    with pytest.raises(ValueError):
        load_config(_write(tmp_path, "- just\n- a list\n"))


def test_build_store(tmp_path):
    assert isinstance(build_store(StoreCfg(kind="memory")), MemoryRecordStore)
    assert isinstance(build_store(StoreCfg(kind="json", path=str(tmp_path))), JsonFileRecordStore)
    assert isinstance(build_store(StoreCfg(kind="http", base_url="https://x.test")), HttpRecordStore)

    with pytest.raises(ValueError):
        build_store(StoreCfg(kind="http"))


def test_logging_section(tmp_path):
    cfg = load_config(_write(tmp_path, "logging:\n  level: DEBUG\n  json_output: true\n"))

    assert cfg.logging.level == "DEBUG"
    assert cfg.logging.json_output is True
