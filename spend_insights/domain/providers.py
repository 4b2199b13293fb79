"""Closed set of provider choices a caller may request"""

from enum import Enum


class Provider(str, Enum):
    """Requested refinement strategy"""

    HEURISTIC = "heuristic"
    GEMINI = "gemini"
    OPENAI = "openai"
    AUTO = "auto"


# Order in which AUTO probes credentialed providers
AUTO_PREFERENCE = (Provider.GEMINI, Provider.OPENAI)


def provider_from_flags(use_gemini: bool = False, use_openai: bool = False) -> Provider:
    """Map legacy boolean flags to a provider; Gemini wins when both are set"""
    if use_gemini:
        return Provider.GEMINI
    if use_openai:
        return Provider.OPENAI
    return Provider.HEURISTIC
