"""Shared base for the stages that work on a loaded flight collection."""

from __future__ import annotations

import logging

from .config import AirlinesConfig
from .reference import ReferenceData


class PipelineComponent:
    """A stage holding the resolved configuration, reference tables and its own logger."""

    def __init__(self, config: AirlinesConfig, reference: ReferenceData) -> None:
        self.config: AirlinesConfig = config
        self.reference: ReferenceData = reference
        self.logger: logging.Logger = logging.getLogger(self.__class__.__name__)
