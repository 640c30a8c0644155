"""Artifact-set (plugin) identities and language variants."""

from enum import Enum

PLUGIN_NAME_EN = "shirokuma-skills-en"
PLUGIN_NAME_JA = "shirokuma-skills-ja"
PLUGIN_NAME_HOOKS = "shirokuma-hooks"

# Project-relative directory the active rules are deployed into
DEPLOYED_RULES_DIR = ".claude/rules/shirokuma"
LEGACY_DEPLOYED_RULES_DIR_JA = ".claude/rules/shirokuma-ja"
LEGACY_PLUGIN_DIR = ".claude/plugins"


class LanguageVariant(Enum):
    """Mutually exclusive language variants of the skills plugin."""

    ENGLISH = "english"
    JAPANESE = "japanese"

    @classmethod
    def parse(cls, value: object) -> "LanguageVariant | None":
        """Parse a settings value; anything unrecognized means "not set"."""
        for variant in cls:
            if variant.value == value:
                return variant
        return None

    @property
    def plugin_name(self) -> str:
        if self is LanguageVariant.JAPANESE:
            return PLUGIN_NAME_JA
        return PLUGIN_NAME_EN

    @property
    def opposite(self) -> "LanguageVariant":
        if self is LanguageVariant.JAPANESE:
            return LanguageVariant.ENGLISH
        return LanguageVariant.JAPANESE


def registry_id(plugin_name: str, marketplace_name: str) -> str:
    """Build the host registry identifier: `<plugin>@<marketplace>`."""
    return f"{plugin_name}@{marketplace_name}"


def primary_plugin_name(variant: LanguageVariant | None) -> str:
    """Plugin holding the skills for a language setting (English when unset)."""
    if variant is None:
        return PLUGIN_NAME_EN
    return variant.plugin_name
