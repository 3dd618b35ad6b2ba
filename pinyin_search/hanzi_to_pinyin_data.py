"""
Static constants for the Han → pinyin candidate tables.

The candidate readings themselves come from pypinyin's single-character dictionary
(``pypinyin.pinyin_dict.pinyin_dict``); this module pins down the code-point window
the tables cover, the sentinel values stored in the serialized table and the few
characters that are handled outside the table.
"""

from types import MappingProxyType

# ════════════════════════════════════════════════════════════════════════════════
# CODE-POINT WINDOW
# ════════════════════════════════════════════════════════════════════════════════

# CJK Unified Ideographs, the block covered by dialer/contact pinyin tables
BASE_CODEPOINT = 0x4E00  # 一
LAST_CODEPOINT = 0x9FA5  # 龥 (inclusive)
TABLE_SIZE = LAST_CODEPOINT - BASE_CODEPOINT + 1  # 20902 entries

# 〇 (IDEOGRAPHIC NUMBER ZERO) lives in the CJK Symbols block, outside the window,
# but is written as a Han numeral in names and addresses
LEGACY_PLACEHOLDER = "\u3007"
LEGACY_PLACEHOLDER_SYLLABLE = "ling"

# ════════════════════════════════════════════════════════════════════════════════
# SERIALIZED TABLE FORMAT
# ════════════════════════════════════════════════════════════════════════════════

# Bump when the pickled payload layout changes
TABLE_FORMAT_VERSION = 1

# Candidate index meaning "emit the original character" (no confirmed reading)
VERBATIM_INDEX = -1

PAYLOAD_KEYS = (
    "format_version",
    "pypinyin_version",
    "base_codepoint",
    "table_size",
    "umlaut_marker",
    "syllables",
    "candidates",
)

# ════════════════════════════════════════════════════════════════════════════════
# TONE STRIPPING
# ════════════════════════════════════════════════════════════════════════════════

COMBINING_DIAERESIS = "\u0308"

# ü keeps a marker after tone stripping: 绿 lǜ → "lu:"
DEFAULT_UMLAUT_MARKER = ":"

# ════════════════════════════════════════════════════════════════════════════════
# AVAILABILITY PROBE / SANITY CHECKS
# ════════════════════════════════════════════════════════════════════════════════

PROBE_CHARACTER = "中"

# Canonical readings a freshly built table must reproduce
SANITY_READINGS = MappingProxyType(
    {
        "中": "zhong",
        "国": "guo",
        "好": "hao",
        "人": "ren",
        "张": "zhang",
    }
)
