"""Han character to pinyin conversion for sorting, indexing and prefix/acronym search."""

from .hanzi_to_pinyin import (
    CacheInfo,
    HanziToPinyin,
    HanziToPinyinConfig,
    PinyinTables,
    get_all_first_letters,
    get_all_full_pinyin,
    get_first_letters,
    get_full_pinyin,
    get_split_pinyin,
    is_chinese_words,
    is_first_chinese_words,
)

__all__ = [
    "CacheInfo",
    "HanziToPinyin",
    "HanziToPinyinConfig",
    "PinyinTables",
    "get_all_first_letters",
    "get_all_full_pinyin",
    "get_first_letters",
    "get_full_pinyin",
    "get_split_pinyin",
    "is_chinese_words",
    "is_first_chinese_words",
]
