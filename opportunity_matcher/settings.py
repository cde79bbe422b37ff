# opportunity_matcher/settings.py
from datetime import datetime
from typing import Callable

from opportunity_matcher.errors import InvalidWeightConfiguration
from opportunity_matcher.logging_config import get_logger
from opportunity_matcher.models import SystemSettings
from opportunity_matcher.scoring import DEFAULT_WEIGHTS, ScoringWeights, WeightSettings
from opportunity_matcher.store.base import RecordStore
from opportunity_matcher.utils import utc_now

logger = get_logger(__name__)

SYSTEM_SETTINGS = "system_settings"
DEFAULT_SETTINGS_ID = "default"


class SettingsRepository:
    """
    Persisted platform settings. Only the matching weight pair matters here;
    it is validated before anything is written.
    """

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.clock = clock

    def load(self) -> SystemSettings:
        record = self.store.get(SYSTEM_SETTINGS, DEFAULT_SETTINGS_ID)
        if record is None:
            defaults = SystemSettings(id=DEFAULT_SETTINGS_ID, updated_at=self.clock())
            self.store.put(SYSTEM_SETTINGS, DEFAULT_SETTINGS_ID, defaults.to_record(), merge=True)
            logger.info("settings_defaults_written")
            return defaults
        return SystemSettings.model_validate(record)

    def load_weights(self) -> ScoringWeights:
        """A stored pair that fails validation is logged and replaced by the defaults."""
        settings = self.load()
        try:
            return ScoringWeights(
                skill=settings.matching_skill_weight,
                tag=settings.matching_tag_weight,
            )
        except InvalidWeightConfiguration as e:
            logger.warning("stored_weights_invalid", error=str(e))
            return DEFAULT_WEIGHTS

    def save_weights(self, skill: float, tag: float, updated_by: str) -> ScoringWeights:
        # raises InvalidWeightConfiguration before touching the store
        weights = WeightSettings(self.load_weights()).update(skill, tag)
        settings = SystemSettings(
            id=DEFAULT_SETTINGS_ID,
            matching_skill_weight=weights.skill,
            matching_tag_weight=weights.tag,
            updated_by=updated_by,
            updated_at=self.clock(),
        )
        self.store.put(SYSTEM_SETTINGS, DEFAULT_SETTINGS_ID, settings.to_record(), merge=True)
        return weights
