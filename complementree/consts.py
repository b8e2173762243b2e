from os import environ
from pathlib import Path

TOP_LEVEL = Path(__file__).resolve().parent

_CONF_DIR = TOP_LEVEL / "config"
CONFIG_YML = _CONF_DIR / "defaults.yml"

SETTINGS_VAR = "complementree_settings"

DEBUG = "COMPLEMENTREE_DEBUG" in environ
