"""
Project-wide constants for JSON recovery

This module centralizes the character tables, sentinel values and limits
used by the repair stages and the contract analysis helpers.
"""

# Repair stage levels
LEVEL_DIRECT = 1
LEVEL_NORMALIZED = 2
LEVEL_SANITIZED = 3
LEVEL_REPAIRED = 4
LEVEL_REDUCED = 5

# Characters that upstream generators emit in prose but that break decoding
PROBLEM_CHARACTERS = {
    "\uffff": " ",  # noncharacter
    "\u00a5": "Y",  # yen sign
    "\u00a2": "c",  # cent sign
    "\u2022": "*",  # bullet
    "\u20b9": "Rs",  # rupee sign
    "\u0000": "",
    "\r": "",
}

# Reducer defaults
DEFAULT_SENTINEL = "Content removed due to parsing issues"
DEFAULT_NULL_FIELDS = ("clauseText", "suggestion")
DEFAULT_SENTINEL_FIELDS = ("description",)

# Messages
EMPTY_INPUT_MESSAGE = "Response text is empty"
USER_RETRY_MESSAGE = "Could not parse analysis results. Please try again."

# Result cache
DEFAULT_CACHE_TTL = 3600  # 1 hour in seconds
DEFAULT_CACHE_MAX_ENTRIES = 50

# Contract text limits
CONTRACT_MIN_LENGTH = 100
CONTRACT_MAX_LENGTH = 100_000
MAX_CORRUPTION_RATE = 0.05
REPLACEMENT_CHARACTER = "\ufffd"
