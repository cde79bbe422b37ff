from __future__ import annotations

from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field

from opportunity_matcher.scoring import ScoringWeights
from opportunity_matcher.store import HttpRecordStore, JsonFileRecordStore, MemoryRecordStore, RecordStore


class Weights(BaseModel):
    skill: float = 0.7
    tag: float = 0.3


class Scoring(BaseModel):
    weights: Weights = Field(default_factory=Weights)


class Data(BaseModel):
    # snapshot files for batch ranking
    students_path: str = "data/students.json"
    opportunities_path: str = "data/opportunities.json"


class Output(BaseModel):
    top_n: int = 20
    out_dir: str = "data/results"


class StoreCfg(BaseModel):
    kind: Literal["memory", "json", "http"] = "json"
    path: str = "data/store"
    base_url: Optional[str] = None
    timeout: float = 30


class LoggingCfg(BaseModel):
    level: str = "INFO"
    json_output: bool = False


class Config(BaseModel):
    version: int = 1
    scoring: Scoring = Field(default_factory=Scoring)
    data: Data = Field(default_factory=Data)
    output: Output = Field(default_factory=Output)
    store: StoreCfg = Field(default_factory=StoreCfg)
    logging: LoggingCfg = Field(default_factory=LoggingCfg)

    def scoring_weights(self) -> ScoringWeights:
        w = self.scoring.weights
        return ScoringWeights(skill=w.skill, tag=w.tag)


def load_config(path: str) -> Config:
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Config must be a YAML mapping: {path}")

    cfg = Config(**raw)

    # raises InvalidWeightConfiguration
    cfg.scoring_weights()

    return cfg


def build_store(cfg: StoreCfg) -> RecordStore:
    if cfg.kind == "memory":
        return MemoryRecordStore()
    if cfg.kind == "http":
        if not cfg.base_url:
            raise ValueError("store.base_url is required for the http store")
        return HttpRecordStore(cfg.base_url, timeout=cfg.timeout)
    return JsonFileRecordStore(cfg.path)
