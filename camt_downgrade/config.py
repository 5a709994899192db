#!/usr/bin/env python3

from __future__ import annotations

import logging
from dataclasses import dataclass, fields

import yaml

logger = logging.getLogger(__name__)

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class ConverterConfig:
    """Formatting and output options of a conversion run.

    The placeholder values written for institutional data are not part of
    the configuration, they are the same for every run.
    """

    output_suffix: str = "_08"
    indent: int = 4
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not isinstance(self.output_suffix, str):
            raise TypeError(f"{self.output_suffix=} was not of type `str`")
        if isinstance(self.indent, bool) or not isinstance(self.indent, int):
            raise TypeError(f"{self.indent=} was not of type `int`")
        if not isinstance(self.log_level, str):
            raise TypeError(f"{self.log_level=} was not of type `str`")
        if not self.output_suffix:
            raise ValueError("output_suffix must not be empty")
        if self.indent < 0:
            raise ValueError(f"{self.indent=} must not be negative")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"{self.log_level=} is not one of {LOG_LEVELS}")

    @classmethod
    def from_yaml(cls, fname) -> ConverterConfig:
        with open(fname) as f:
            options = yaml.safe_load(f) or {}

        if not isinstance(options, dict):
            raise TypeError(f"{options=} was not of type `dict`")
        known = {field.name for field in fields(cls)}
        for key in options:
            if key not in known:
                raise ValueError(
                    f"You specified an option {key!r} in your yaml, "
                    f"that is not in the list of allowed options: {sorted(known)}"
                )

        config = cls(**options)
        logger.debug(f"Loaded {config=} from {fname}")
        return config
