"""Pin configuration loading."""

from trustee_pin.config.pin_config import (
    DEFAULT_ATTEMPTS,
    FiniteRetries,
    InfiniteRetries,
    InitdataDocument,
    NumRetries,
    PinConfig,
    ResolutionRequest,
    RetryPolicy,
    Server,
    dump_retry_policy,
    effective_retry_policy,
    parse_pin_config,
    parse_retry_policy,
)
from trustee_pin.config.settings import (
    DEFAULT_SETTINGS_PATH,
    PinSettings,
    SettingsError,
    load_settings,
)

__all__ = [
    "DEFAULT_ATTEMPTS",
    "DEFAULT_SETTINGS_PATH",
    "FiniteRetries",
    "InfiniteRetries",
    "InitdataDocument",
    "NumRetries",
    "PinConfig",
    "PinSettings",
    "ResolutionRequest",
    "RetryPolicy",
    "Server",
    "SettingsError",
    "dump_retry_policy",
    "effective_retry_policy",
    "load_settings",
    "parse_pin_config",
    "parse_retry_policy",
]
