"""Constants for the RimWorld mod layout and the supported translation targets."""

# Data files are XML; About/About.xml is mod metadata and never translated
DATA_FILE_EXTENSION = ".xml"
METADATA_FILENAME = "About.xml"

# Directory components of the RimWorld localization tree
LANGUAGES_DIR = "Languages"
DEFS_DIR = "Defs"
DEF_INJECTED_DIR = "DefInjected"
KEYED_DIR = "Keyed"

# Keyed strings under Languages/English/Keyed are authored by hand and are
# mirrored into every other language
SOURCE_LANGUAGE = "English"

DEFAULT_MODEL = "o4-mini"

# Folder names RimWorld uses under Languages/
SUPPORTED_LANGUAGES: tuple[str, ...] = (
    "Catalan",
    "ChineseSimplified",
    "ChineseTraditional",
    "Czech",
    "Danish",
    "Dutch",
    "English",
    "Estonian",
    "Finnish",
    "French",
    "German",
    "Greek",
    "Hungarian",
    "Italian",
    "Japanese",
    "Korean",
    "Norwegian",
    "Polish",
    "Portuguese",
    "PortugueseBrazilian",
    "Romanian",
    "Russian",
    "Slovak",
    "Spanish",
    "SpanishLatin",
    "Swedish",
    "Turkish",
    "Ukrainian",
    "Vietnamese",
)
