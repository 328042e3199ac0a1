# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Extractor package for the structure extraction engine."""

from dse.extractors.handlers import HandlerExtractor
from dse.extractors.records import RecordExtractor
from dse.extractors.registrations import ModelLookupPolicy, RegistrationExtractor
from dse.extractors.routes import RouteExtractor
from dse.extractors.settings import SettingsExtractor

__all__ = [
    "HandlerExtractor",
    "ModelLookupPolicy",
    "RecordExtractor",
    "RegistrationExtractor",
    "RouteExtractor",
    "SettingsExtractor",
]
