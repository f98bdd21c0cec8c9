"""Shared runtime configuration."""

DEFAULT_CONFIG = {
    "redis_url": "",
    "state_key": "navigator:state",
    "active_url_key": "tab:active_url",
    "navigate_channel": "tab:navigate",
    "log_level": "INFO",
    "port": 8000,
}

# Global configuration object to share across modules. Default settings may be
# injected at runtime by ``set_config``.
config = DEFAULT_CONFIG.copy()


# set_config routine
def set_config(cfg: dict) -> None:
    """Replace the global configuration with ``cfg``.

    Missing keys are filled from :data:`DEFAULT_CONFIG` so callers can rely on
    them being available.
    """

    config.clear()
    config.update(DEFAULT_CONFIG)
    config.update(cfg)
