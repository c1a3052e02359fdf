"""
JSON-file settings store.
"""

from pathlib import Path
from typing import Callable, List, Optional, Union

from pydantic import ValidationError

from ytnote.config import config
from ytnote.models.schemas import ModelConfig, PluginSettings
from ytnote.utils.error_handling import ConfigurationError
from ytnote.utils.helpers import load_json, save_json
from ytnote.utils.logger import logging


class SettingsManager:
    """Loads, exposes and persists ``PluginSettings``."""

    def __init__(self, path: Optional[Union[str, Path]] = None, settings: Optional[PluginSettings] = None):
        """
        Initialize the settings manager.

        Args:
            path: Settings file (defaults to ``config.SETTINGS_FILE``)
            settings: Initial settings, mainly for tests and embedding
        """
        self.path = Path(path) if path else config.SETTINGS_FILE
        self.settings = settings or PluginSettings()
        self._listeners: List[Callable[[], None]] = []

    def load_settings(self) -> PluginSettings:
        """Read the settings file, keeping defaults when it does not exist."""
        if not self.path.exists():
            logging.info(f"No settings file at {self.path}, using defaults")
            return self.settings
        try:
            self.settings = PluginSettings.model_validate(load_json(str(self.path)))
        except (ValueError, ValidationError) as e:
            raise ConfigurationError(f"Invalid settings file {self.path}: {e}") from e
        logging.debug(f"Settings loaded from {self.path}")
        return self.settings

    def save_settings(self) -> None:
        """Write the settings file and tell listeners to rebuild their services."""
        save_json(self.settings.model_dump(mode="json"), str(self.path))
        logging.info(f"Settings saved to {self.path}")
        for listener in self._listeners:
            listener()

    def on_change(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def update(self, **changes) -> PluginSettings:
        """Validate and apply changes, then persist them."""
        data = self.settings.model_dump()
        data.update(changes)
        try:
            self.settings = PluginSettings.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e
        self.save_settings()
        return self.settings

    def _api_key_for(self, provider: str) -> Optional[str]:
        provider_settings = self.settings.providers.get(provider)
        if provider_settings and provider_settings.api_key:
            return provider_settings.api_key
        return getattr(config, f"{provider.upper()}_API_KEY", None)

    def get_selected_model(self) -> Optional[ModelConfig]:
        if not self.settings.selected_model:
            return None
        entry = next((m for m in self.settings.models if m.id == self.settings.selected_model), None)
        if entry is None:
            logging.warning(f"Selected model {self.settings.selected_model!r} is not in the model list")
            return None
        return ModelConfig(
            provider_name=entry.provider,
            model_name=entry.model,
            api_key=self._api_key_for(entry.provider),
            max_tokens=self.settings.max_tokens,
            temperature=self.settings.temperature,
        )

    def get_custom_prompt(self) -> str:
        return self.settings.custom_prompt

    def get_max_tokens(self) -> int:
        return self.settings.max_tokens

    def get_temperature(self) -> float:
        return self.settings.temperature

    def get_auto_summarize_webclips(self) -> bool:
        return self.settings.auto_summarize_webclips

    def get_auto_summarize_pasted_urls(self) -> bool:
        return self.settings.auto_summarize_pasted_urls
