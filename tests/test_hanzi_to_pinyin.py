"""
Engine tests against small injected tables.

Covers candidate resolution, canonical formatting, combinatorial expansion and the
pass-through behaviour when romanization is unavailable. The tables are built from
explicit readings so expectations do not depend on the installed pypinyin data.
"""

import sys
import threading
from pathlib import Path
import pytest

# Add the parent directory to path to import pinyin_search
sys.path.insert(0, str(Path(__file__).parent.parent))

from pinyin_search.hanzi_to_pinyin import (
    VERBATIM,
    HanziToPinyin,
    HanziToPinyinConfig,
    PinyinTables,
    SyllableRef,
    expand_first_letters,
    expand_full_readings,
    expansion_size,
    first_letters,
    full_pinyin,
    iter_full_readings,
    split_pinyin,
    strip_tone,
)

READINGS = {
    "好": ["hao", "hao"],
    "中": ["zhong", "zhong"],
    "国": ["guo"],
    "行": ["xing", "hang"],
    "走": ["zou"],
    "乐": ["le", "yue"],
    "长": ["chang", "zhang"],
    "的": ["de", "di"],
    "张": ["zhang"],
    "三": ["san"],
    "吕": ["lu:"],
    "丁": [],
}


@pytest.fixture(scope="module")
def tables():
    return PinyinTables.from_readings(READINGS)


@pytest.fixture
def config(tmp_path):
    return HanziToPinyinConfig.create_default().with_cache_dir(tmp_path).without_disk_cache().with_enabled(True)


@pytest.fixture
def converter(config, tables):
    return HanziToPinyin(config, tables=tables)


@pytest.fixture
def disabled_converter(config, tables):
    return HanziToPinyin(config.with_enabled(False), tables=tables)


# Input → (full pinyin, first letters, split pinyin)
CANONICAL_TEST_CASES = [
    ("好", ("HAO", "H", ["HAO"])),
    ("中国", ("ZHONGGUO", "ZG", ["ZHONG", "GUO"])),
    ("张三", ("ZHANGSAN", "ZS", ["ZHANG", "SAN"])),
    ("A好", ("AHAO", "AH", ["A", "HAO"])),
    ("行走", ("XINGZOU", "XZ", ["XING", "ZOU"])),
    ("张 三", ("ZHANG SAN", "Z S", ["ZHANG", " ", "SAN"])),
    ("吕", ("LU:", "L", ["LU:"])),
    ("〇", ("LING", "L", ["LING"])),
    ("丁", ("丁", "丁", ["丁"])),
    ("天", ("天", "天", ["天"])),
    ("Bob", ("BOB", "BOB", ["B", "O", "B"])),
    ("", ("", "", [""])),
]

# Input → (all full readings, all first letters)
EXPANSION_TEST_CASES = [
    ("好", (("HAO",), ("H",))),
    ("中国", (("ZHONGGUO",), ("ZG",))),
    ("行走", (("XINGZOU", "HANGZOU"), ("XZ", "HZ"))),
    ("的长", (("DECHANG", "DEZHANG", "DICHANG", "DIZHANG"), ("DC", "DZ"))),
    ("A行", (("AXING", "AHANG"), ("AX", "AH"))),
    ("", (("",), ("",))),
]


def test_canonical_outputs(converter):
    """Full pinyin, acronym and split array always use the first candidate."""
    for input_text, (expected_full, expected_letters, expected_split) in CANONICAL_TEST_CASES:
        assert converter.get_full_pinyin(input_text) == expected_full, f"full pinyin of {input_text!r}"
        assert converter.get_first_letters(input_text) == expected_letters, f"first letters of {input_text!r}"
        assert converter.get_split_pinyin(input_text) == expected_split, f"split pinyin of {input_text!r}"


def test_expansion_outputs(converter):
    """Every polyphone combination, canonical reading first."""
    for input_text, (expected_full, expected_letters) in EXPANSION_TEST_CASES:
        assert converter.get_all_full_pinyin(input_text) == expected_full, f"readings of {input_text!r}"
        assert converter.get_all_first_letters(input_text) == expected_letters, f"acronyms of {input_text!r}"


def test_resolve_char(converter):
    assert converter.resolve_char("好") == ("hao", "hao")
    assert converter.resolve_char("行") == ("xing", "hang")
    assert converter.resolve_char("〇") == ("ling",)
    # Characters outside the window pass through verbatim
    assert converter.resolve_char("A") == ("A",)
    assert converter.resolve_char("，") == ("，",)
    assert converter.resolve_char("가") == ("가",)
    assert converter.resolve_char("\U00020000") == ("\U00020000",)
    # In the window but without a confirmed reading
    assert converter.resolve_char("丁") == ("丁",)
    assert converter.resolve_char("天") == ("天",)
    # Not a single character
    assert converter.resolve_char("") == ("",)
    assert converter.resolve_char("好好") == ("好好",)


def test_resolve_string(converter):
    assert converter.resolve_string("A好") == (("A",), ("hao", "hao"))
    assert converter.resolve_string("") == (("",),)
    assert converter.resolve_string(None) == (("",),)


def test_none_is_treated_as_empty(converter):
    assert converter.get_full_pinyin(None) == ""
    assert converter.get_first_letters(None) == ""
    assert converter.get_split_pinyin(None) == [""]
    assert converter.get_all_full_pinyin(None) == ("",)
    assert converter.get_all_first_letters(None) == ("",)


def test_split_length_matches_character_count(converter):
    for input_text in ["", "好", "中国", "A好b", "行走 abc", "〇丁天", "\U00020000好"]:
        expected = len(input_text) if input_text else 1
        assert len(converter.get_split_pinyin(input_text)) == expected, f"split length of {input_text!r}"


def test_acronym_is_first_letter_of_each_split_syllable(converter):
    for input_text in ["好", "中国", "张三", "A好", "行走", "吕〇", "Bob"]:
        resolved = converter.resolve_string(input_text)
        assert first_letters(resolved) == "".join(s[:1] for s in split_pinyin(resolved))
        assert full_pinyin(resolved) == "".join(split_pinyin(resolved))


def test_canonical_formatting_is_idempotent(converter):
    resolved = converter.resolve_string("行走中国")
    assert full_pinyin(resolved) == full_pinyin(resolved)
    assert first_letters(resolved) == first_letters(resolved)
    assert converter.get_full_pinyin("行走中国") == converter.get_full_pinyin("行走中国")


def test_expansion_size_is_product_of_candidate_counts(converter):
    resolved = converter.resolve_string("行乐长")
    assert expansion_size(resolved) == 8
    readings = expand_full_readings(resolved)
    assert len(readings) == 8
    assert readings[0] == "XINGLECHANG"
    assert set(readings) == {a + b + c for a in ("XING", "HANG") for b in ("LE", "YUE") for c in ("CHANG", "ZHANG")}


def test_first_letters_are_deduplicated(converter):
    resolved = converter.resolve_string("的的长")
    assert len(expand_full_readings(resolved)) == 8
    acronyms = expand_first_letters(resolved)
    assert acronyms == ("DDC", "DDZ")
    assert len(acronyms) == len(set(acronyms))


def test_duplicate_candidates_collapse_in_full_expansion(converter):
    """好 lists hao twice; the lazy product yields duplicates, the expansion does not."""
    resolved = converter.resolve_string("好好")
    assert expansion_size(resolved) == 4
    assert list(iter_full_readings(resolved)) == ["HAOHAO"] * 4
    assert expand_full_readings(resolved) == ("HAOHAO",)


def test_iter_full_readings_is_lazy(converter):
    resolved = converter.resolve_string("行乐长的")
    readings = iter_full_readings(resolved)
    assert next(readings) == "XINGLECHANGDE"
    assert next(readings) == "XINGLECHANGDI"
    assert sum(1 for _ in readings) == 14


def test_unavailable_passes_whole_string_through(disabled_converter):
    for input_text in ["A好b", "中国", "hello", "行走"]:
        assert disabled_converter.resolve_string(input_text) == ((input_text,),)
        assert disabled_converter.get_full_pinyin(input_text) == input_text.upper()
        assert disabled_converter.get_split_pinyin(input_text) == [input_text.upper()]
        assert disabled_converter.get_first_letters(input_text) == input_text[0].upper()
        assert disabled_converter.get_all_full_pinyin(input_text) == (input_text.upper(),)
        assert disabled_converter.get_all_first_letters(input_text) == (input_text[0].upper(),)

    assert disabled_converter.resolve_char("好") == ("好",)
    assert disabled_converter.resolve_char("〇") == ("〇",)
    assert disabled_converter.get_full_pinyin("") == ""
    assert disabled_converter.is_available() is False


def test_probe_decides_availability(config, tables):
    probed = HanziToPinyin(config.with_enabled(None), tables=tables, probe=lambda: True)
    assert probed.is_available()
    assert probed.get_full_pinyin("好") == "HAO"

    refused = HanziToPinyin(config.with_enabled(None), tables=tables, probe=lambda: False)
    assert not refused.is_available()
    assert refused.get_full_pinyin("好") == "好"


def test_failing_probe_is_treated_as_unavailable(config, tables):
    def probe():
        raise RuntimeError("collation resource missing")

    converter = HanziToPinyin(config.with_enabled(None), tables=tables, probe=probe)
    assert not converter.is_available()
    assert converter.get_full_pinyin("中国") == "中国"


def test_probe_runs_once(config, tables):
    calls = []

    def probe():
        calls.append(1)
        return True

    converter = HanziToPinyin(config.with_enabled(None), tables=tables, probe=probe)
    for _ in range(5):
        converter.get_full_pinyin("好")
    converter.get_all_full_pinyin("行走")
    assert len(calls) == 1


def test_is_chinese_words(converter):
    assert converter.is_chinese_words("abc好")
    assert converter.is_chinese_words("〇")
    assert converter.is_chinese_words("天")
    assert not converter.is_chinese_words("abc")
    assert not converter.is_chinese_words("가나다")
    assert not converter.is_chinese_words("")
    assert not converter.is_chinese_words(None)


def test_is_first_chinese_words(converter):
    assert converter.is_first_chinese_words("好abc")
    assert not converter.is_first_chinese_words("a好")
    assert not converter.is_first_chinese_words(" 好")
    assert not converter.is_first_chinese_words("")


def test_chinese_classification_ignores_availability(disabled_converter):
    """Classification looks at the text only, even while lookups pass through."""
    assert disabled_converter.is_chinese_words("abc好")
    assert disabled_converter.is_first_chinese_words("好abc")
    assert disabled_converter.get_full_pinyin("好") == "好"


def test_concurrent_lookups_share_tables(converter):
    expected = converter.get_all_full_pinyin("行乐长的")
    results = []

    def worker():
        for _ in range(200):
            results.append(converter.get_all_full_pinyin("行乐长的"))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 1600
    assert all(result == expected for result in results)


def test_injected_tables_survive_cache_clear(converter):
    converter.clear_pinyin_cache()
    assert converter.get_full_pinyin("好") == "HAO"
    assert converter.rebuild_pinyin_cache()
    assert converter.get_cache_info().cache_built


# ════════════════════════════════════════════════════════════════════════════════
# TABLE CONSTRUCTION
# ════════════════════════════════════════════════════════════════════════════════


def test_tables_from_readings(tables):
    assert len(tables) == 20902
    assert tables.syllables == tuple(sorted(set(tables.syllables)))
    offset = ord("行") - tables.base_codepoint
    entry = tables.candidates_at(offset)
    assert [tables.syllable(ref.index) for ref in entry] == ["xing", "hang"]
    assert tables.candidates_at(ord("丁") - tables.base_codepoint) == (VERBATIM,)
    assert tables.candidates_at(-1) is None
    assert tables.candidates_at(len(tables)) is None


def test_tables_reject_characters_outside_window():
    with pytest.raises(ValueError):
        PinyinTables.from_readings({"A": ["a"]})
    with pytest.raises(ValueError):
        PinyinTables.from_readings({"〇": ["ling"]})


def test_tables_reject_corrupt_references():
    with pytest.raises(ValueError):
        PinyinTables(["hao"], [(SyllableRef(1),)])
    with pytest.raises(ValueError):
        PinyinTables(["hao"], [(SyllableRef(-1),)])
    with pytest.raises(ValueError):
        PinyinTables(["hao"], [()])


def test_tables_reject_invalid_syllables():
    with pytest.raises(ValueError):
        PinyinTables([0, 1], [(SyllableRef(0),)])
    with pytest.raises(ValueError):
        PinyinTables(["hao", ""], [(SyllableRef(0),)])
    with pytest.raises(ValueError):
        PinyinTables(["hao"], [(SyllableRef("0"),)])


def test_payload_with_wrong_types_is_rejected(tables):
    payload = tables.to_payload(":")

    bad_syllables = dict(payload, syllables=tuple(range(len(payload["syllables"]))))
    with pytest.raises(ValueError):
        PinyinTables.from_payload(bad_syllables)

    bad_indices = dict(payload, candidates=tuple(tuple(str(i) for i in entry) for entry in payload["candidates"]))
    with pytest.raises(ValueError):
        PinyinTables.from_payload(bad_indices)

    bool_indices = dict(payload, candidates=((True,),) * len(payload["candidates"]))
    with pytest.raises(ValueError):
        PinyinTables.from_payload(bool_indices)


def test_payload_encodes_verbatim_sentinel(tables):
    payload = tables.to_payload(":")
    offset = ord("丁") - tables.base_codepoint
    assert payload["candidates"][offset] == (-1,)

    decoded = PinyinTables.from_payload(payload)
    assert decoded.readings_for("丁") == ("丁",)
    assert decoded.readings_for("行") == ("xing", "hang")
    assert decoded.syllables == tables.syllables


def test_strip_tone():
    cases = [
        ("hǎo", ":", "hao"),
        ("Zhōng", ":", "zhong"),
        ("lǜ", ":", "lu:"),
        ("lǜ", "v", "lv"),
        ("nǚ", "v", "nv"),
        ("lüè", ":", "lu:e"),
        ("ḿ", ":", "m"),
        ("ê̄", ":", "e"),
        ("xing", ":", "xing"),
    ]
    for reading, marker, expected in cases:
        assert strip_tone(reading, marker) == expected, f"strip_tone({reading!r}, {marker!r})"
