"""Targets and reminder settings service."""

from dataclasses import dataclass

import pydantic

from meal_coach.domain.errors import ValidationError
from meal_coach.domain.settings import ReminderSettings, Targets
from meal_coach.services.storage import SETTINGS_KEY, TARGETS_KEY, DocumentStore


@dataclass
class PreferencesService:
    """Reads and replaces the settings and targets documents.

    Updates replace the whole document; concurrent writers resolve as
    last-writer-wins.
    """

    store: DocumentStore

    def get_settings(self) -> ReminderSettings:
        """Return stored settings or the defaults."""
        document = self.store.get(SETTINGS_KEY)
        if document is None:
            return ReminderSettings()
        return ReminderSettings.model_validate(document)

    def set_settings(self, document: dict[str, object]) -> ReminderSettings:
        """Validate and persist a settings document."""
        try:
            settings = ReminderSettings.model_validate(document)
        except pydantic.ValidationError as exc:
            raise ValidationError("invalid_settings", str(exc)) from exc
        self.store.set(SETTINGS_KEY, settings.to_document())
        return settings

    def get_targets(self) -> dict[str, float]:
        """Return stored targets or the defaults."""
        document = self.store.get(TARGETS_KEY)
        return Targets.model_validate(document or {}).to_document()

    def set_targets(self, document: dict[str, object]) -> dict[str, float]:
        """Validate and persist a targets document."""
        try:
            targets = Targets.model_validate(document)
        except pydantic.ValidationError as exc:
            raise ValidationError("invalid_targets", str(exc)) from exc
        self.store.set(TARGETS_KEY, targets.to_document())
        return targets.to_document()
