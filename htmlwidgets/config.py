"""
Form configuration.

Values default to the constants in :mod:`htmlwidgets.const` and can be
read from a Flask style ``app.config`` mapping with ``HTMLWIDGETS_`` keys.
"""

from dataclasses import dataclass, fields
from typing import Any, Mapping

from . import const


CONFIG_PREFIX = "HTMLWIDGETS_"


@dataclass
class FormConfig:
    """Settings shared by a form and all of its widgets"""

    add_to_list_param: str = const.ADD_TO_LIST_PARAM
    remove_from_list_param: str = const.REMOVE_FROM_LIST_PARAM
    # Used by TimeWidgets that don't define their own location
    time_zone: str = const.DEFAULT_TIME_ZONE
    multipart_enctype: str = const.MULTIPART_ENCTYPE

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "FormConfig":
        """
        Build a configuration from a mapping such as ``app.config``.

        Args:
            mapping: Mapping with optional ``HTMLWIDGETS_<FIELD>`` keys,
                e.g. ``HTMLWIDGETS_TIME_ZONE``

        Returns:
            A FormConfig, unknown keys are ignored
        """
        kwargs = {}
        for config_field in fields(cls):
            key = CONFIG_PREFIX + config_field.name.upper()
            if key in mapping:
                kwargs[config_field.name] = mapping[key]
        return cls(**kwargs)
