"""Per-language prompt profiles.

Profiles are stored in prompts/languages.yaml and keyed by a closed set of
language codes. Unrecognized codes fall back to the default (English) profile.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

import yaml
from pydantic import BaseModel

from ..errors import ConfigurationError

PROMPTS_PATH = Path(__file__).resolve().parent.parent / "prompts" / "languages.yaml"

class Language(str, Enum):
    EN = "en"
    HE = "he"
    AR = "ar"

DEFAULT_LANGUAGE = Language.EN

class LanguageProfile(BaseModel):
    system_prompt: str
    user_template: str
    evidence_template: str
    no_evidence: str = ""
    translation_prompt: Optional[str] = None

@lru_cache()
def load_profiles() -> Dict[Language, LanguageProfile]:
    if not PROMPTS_PATH.exists():
        raise ConfigurationError(f"Prompt profiles not found at {PROMPTS_PATH}")

    with open(PROMPTS_PATH, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    profiles = {
        Language(code): LanguageProfile(**entry)
        for code, entry in (data.get("languages") or {}).items()
    }

    missing = [lang.value for lang in Language if lang not in profiles]
    if missing:
        raise ConfigurationError(f"Missing prompt profiles for: {', '.join(missing)}")
    return profiles

def resolve_language(code: Optional[str]) -> Optional[Language]:
    """Returns the closed-set language for `code`, or None if unrecognized."""
    try:
        return Language(code)
    except ValueError:
        return None

def get_profile(code: Optional[str]) -> LanguageProfile:
    profiles = load_profiles()
    return profiles[resolve_language(code) or DEFAULT_LANGUAGE]
