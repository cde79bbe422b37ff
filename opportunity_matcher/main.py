# opportunity_matcher/main.py
from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from opportunity_matcher.config import load_config
from opportunity_matcher.logging_config import configure_logging, get_logger
from opportunity_matcher.models import AccountStatus, MatchResult, OpportunityRequirements, SkillProfile
from opportunity_matcher.ranking import rank_opportunities_for_student, rank_students_for_opportunity

logger = get_logger(__name__)


def _load_json_list(path: Path) -> List[Dict[str, Any]]:
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Snapshot must be a JSON list: {path}")
    return data


def _resolve(base: Path, p: str) -> Path:
    path = Path(p).expanduser()
    return path if path.is_absolute() else (base / path).resolve()


def _write_results(results: List[MatchResult], out_dir: Path, name: str) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)

    out_json = out_dir / f"{name}.json"
    out_csv = out_dir / f"{name}.csv"

    out_json.write_text(
        json.dumps([r.model_dump() for r in results], indent=2), encoding="utf-8"
    )

    fieldnames = [
        "score",
        "student_id",
        "opportunity_id",
        "skill_ratio",
        "tag_ratio",
        "skill_overlap",
        "tag_overlap",
    ]

    with out_csv.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for r in results:
            row = r.model_dump()
            row["skill_overlap"] = ", ".join(r.skill_overlap)
            row["tag_overlap"] = ", ".join(str(t) for t in r.tag_overlap)
            writer.writerow({k: row.get(k, "") for k in fieldnames})

    logger.info("results_written", matches=len(results), json=str(out_json), csv=str(out_csv))


def run(
    config_path: str = "config/config.yaml",
    student_id: Optional[str] = None,
    opportunity_id: Optional[str] = None,
) -> List[MatchResult]:
    """
    Rank one student against every open opportunity, or one opportunity
    against every active student, from the snapshot files named in the
    config. Relative paths in the config are taken from the directory above
    the config file.
    """
    if bool(student_id) == bool(opportunity_id):
        raise ValueError("Pass exactly one of student_id or opportunity_id")

    config_file = Path(config_path).expanduser().resolve()
    cfg = load_config(str(config_file))
    configure_logging(cfg.logging.level, cfg.logging.json_output)

    base = config_file.parent.parent
    logger.debug("config_loaded", config=str(config_file), weights=cfg.scoring.weights.model_dump())

    weights = cfg.scoring_weights()
    students = [
        SkillProfile.model_validate(s)
        for s in _load_json_list(_resolve(base, cfg.data.students_path))
    ]
    opportunities = [
        OpportunityRequirements.model_validate(o)
        for o in _load_json_list(_resolve(base, cfg.data.opportunities_path))
    ]

    if student_id:
        student = next((s for s in students if s.student_id == student_id), None)
        if student is None:
            raise KeyError(f"Unknown student: {student_id}")
        open_opportunities = [o for o in opportunities if o.is_open]
        results = rank_opportunities_for_student(student, open_opportunities, weights, cfg.output.top_n)
        name = f"student_{student_id}"
    else:
        opportunity = next((o for o in opportunities if o.opportunity_id == opportunity_id), None)
        if opportunity is None:
            raise KeyError(f"Unknown opportunity: {opportunity_id}")
        active = [s for s in students if s.account_status == AccountStatus.ACTIVE]
        results = rank_students_for_opportunity(opportunity, active, weights, cfg.output.top_n)
        name = f"opportunity_{opportunity_id}"

    _write_results(results, _resolve(base, cfg.output.out_dir), name)
    return results
