from re import error as RegexError
from typing import Any, Mapping

from std2.graphlib import merge
from std2.pickle.decoder import new_decoder
from std2.pickle.types import DecodeError
from yaml import safe_load

from ..consts import CONFIG_YML
from ..shared.parse import PrefixPolicy, prefix_pattern, regex_policy, word_policy
from ..shared.settings import Settings
from .rt_types import ValidationError


def _validate(config: Settings) -> None:
    if config.match.min_prefix < 0:
        raise ValidationError("match.min_prefix < 0")
    if config.limits.completion_timeout <= 0:
        raise ValidationError("limits.completion_timeout <= 0")
    if config.limits.resolve_timeout <= 0:
        raise ValidationError("limits.resolve_timeout <= 0")
    if config.clients.paths.max_depth <= 0:
        raise ValidationError("clients.paths.max_depth <= 0")
    if (pattern := config.cache.prefix_pattern) is not None:
        try:
            prefix_pattern(pattern)
        except RegexError as e:
            raise ValidationError(f"cache.prefix_pattern -- {e}") from e


def load_settings(user_config: Any) -> Settings:
    yml = safe_load(CONFIG_YML.read_text("UTF-8"))
    u_conf = user_config or {}
    if not isinstance(u_conf, Mapping):
        raise ValidationError(f"Settings must be a mapping -- {type(u_conf)}")

    merged = merge(yml, u_conf, replace=True)
    try:
        config = new_decoder[Settings](Settings)(merged)
    except DecodeError as e:
        raise ValidationError(str(e)) from e

    _validate(config)
    return config


def prefix_policy(settings: Settings) -> PrefixPolicy:
    if settings.cache.prefix_pattern is not None:
        return regex_policy(settings.cache.prefix_pattern)
    else:
        return word_policy(settings.match.unifying_chars)
