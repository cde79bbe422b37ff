import pytest

from opportunity_matcher.engine import OPPORTUNITIES, STUDENT_PROFILES, MatchEngine
from opportunity_matcher.models import OpportunityRequirements, SkillProfile
from opportunity_matcher.settings import DEFAULT_SETTINGS_ID, SYSTEM_SETTINGS, SettingsRepository
from opportunity_matcher.store.memory import MemoryRecordStore


@pytest.fixture
def store():
    store = MemoryRecordStore()
    students = [
        SkillProfile(student_id="ada", skills=["React", "TypeScript"], interest_tags=[8, 10]),
        SkillProfile(student_id="kofi", skills=["Python"], interest_tags=[4]),
        SkillProfile(student_id="mira", skills=["React", "TypeScript", "Node.js"], account_status="suspended"),
    ]
    opportunities = [
        OpportunityRequirements(
            opportunity_id="web", org_id="org1", required_skills=["React", "TypeScript", "Node.js"], tags=[8]
        ),
        OpportunityRequirements(opportunity_id="data", org_id="org2", required_skills=["Python"], tags=[4]),
        OpportunityRequirements(
            opportunity_id="old", org_id="org1", required_skills=["React"], tags=[8], status="closed"
        ),
    ]
    for s in students:
        store.put(STUDENT_PROFILES, s.student_id, s.model_dump(mode="json"))
    for o in opportunities:
        store.put(OPPORTUNITIES, o.opportunity_id, o.model_dump(mode="json"))
    return store


def test_only_open_opportunities_are_ranked(store):
    results = MatchEngine(store).opportunities_for_student("ada")

    assert [r.opportunity_id for r in results] == ["web", "data"]
    assert results[0].score == 76.67


def test_suspended_students_are_left_out(store):
    results = MatchEngine(store).students_for_opportunity("web")

    assert [r.student_id for r in results] == ["ada", "kofi"]


def test_unknown_ids_give_empty_results(store):
    engine = MatchEngine(store)

    assert engine.opportunities_for_student("nobody") == []
    assert engine.students_for_opportunity("nothing") == []


def test_weights_are_read_on_every_call(store):
    settings = SettingsRepository(store)
    engine = MatchEngine(store, settings)

    before = engine.opportunities_for_student("ada", limit=1)[0].score
    settings.save_weights(0.5, 0.5, updated_by="admin")
    after = engine.opportunities_for_student("ada", limit=1)[0].score

    assert before == 76.67
    assert after == 83.33


def test_ranking_survives_a_corrupt_stored_weight_pair(store):
    store.put(
        SYSTEM_SETTINGS,
        DEFAULT_SETTINGS_ID,
        {"id": DEFAULT_SETTINGS_ID, "matching_skill_weight": 2.0, "matching_tag_weight": -1.0},
    )

    results = MatchEngine(store, SettingsRepository(store)).opportunities_for_student("ada")

    assert [r.opportunity_id for r in results] == ["web", "data"]
    assert results[0].score == 76.67
