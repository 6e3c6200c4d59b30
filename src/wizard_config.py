"""
Wizard config registry.
Resolves a wizard identifier to a validated, read-only WizardConfig.
"""

import logging
from functools import lru_cache

from pydantic import ValidationError

from data.wizard_configs import get_wizard_config_data
from src.errors import ConfigNotFoundError, InvalidConfigError
from src.schemas import WizardConfig

logger = logging.getLogger(__name__)


@lru_cache(maxsize=32)
def load_wizard_config(wizard_id: str) -> WizardConfig:
    """
    Load and validate a wizard config by id.

    Configs are immutable, so the validated instance is cached and shared
    across sessions.

    Raises:
        ConfigNotFoundError: no config registered under ``wizard_id``
        InvalidConfigError: the config fails structural validation
    """
    raw = get_wizard_config_data(wizard_id)
    if raw is None:
        raise ConfigNotFoundError(wizard_id)

    try:
        config = WizardConfig.model_validate(raw)
    except ValidationError as e:
        logger.error(f"Wizard config '{wizard_id}' failed validation: {e}")
        raise InvalidConfigError(f'Invalid wizard config "{wizard_id}": {e}') from e

    logger.info(
        f"Loaded wizard config {wizard_id}: "
        f"{len(config.steps)} steps, {len(config.elements)} elements"
    )
    return config
