"""Utility helpers for odbcbridge."""

from odbcbridge.utils import logging, serializers, type_guards

__all__ = ("logging", "serializers", "type_guards")
