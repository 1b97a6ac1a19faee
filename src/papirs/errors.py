from __future__ import annotations


class ConfigError(ValueError):
    pass
