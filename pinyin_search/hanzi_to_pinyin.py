"""
Han Character to Pinyin Conversion Module

This module converts strings containing Chinese (Han) characters into uppercase pinyin
keys for sorting, indexing and prefix/acronym search (contact lookup, dialer smart-dial).

## Overview

The core functionality is provided by the `HanziToPinyin` class, which resolves every
character of a string to an ordered list of candidate syllables and formats the result:

1. **Codepoint Resolution**: One character → ordered candidate syllables (canonical first)
2. **String Resolution**: One string → per-character candidate lists, order preserved
3. **Canonical Formatting**: First candidate of every character → full pinyin, acronym, split array
4. **Combinatorial Expansion**: Cartesian product of all candidates → every full reading / acronym

## Architecture

### Clean Service Separation
- **PinyinTables**: Immutable syllable table + per-code-point candidate table
- **TableCacheService**: Init-once table construction with persistent pickle storage
- **AvailabilityGate**: One-time capability probe, fail-safe to pass-through
- **CodepointResolver / StringResolver**: Pure lookups over the immutable tables
- **HanziToPinyin**: Facade wiring the services together with dependency injection

### Data Source
- **pypinyin.pinyin_dict**: Code point → comma-separated toned readings, most common first.
  Readings are tone-stripped and lowercased; ü keeps a marker ("lu:") so it stays distinct
  from u. Duplicates produced by tone stripping (好 hǎo,hào → hao, hao) are preserved.
- **pinyin_table_v1.pkl**: Serialized syllable/candidate tables decoded once per process

## Usage Examples

```python
from pinyin_search.hanzi_to_pinyin import HanziToPinyin

converter = HanziToPinyin()

converter.get_full_pinyin("张三")  # Returns: "ZHANGSAN"
converter.get_first_letters("张三")  # Returns: "ZS"
converter.get_split_pinyin("A好")  # Returns: ["A", "HAO"]

# Every reading of a polyphonic name (行 xing/hang/heng)
converter.get_all_full_pinyin("行走")  # Returns: ("XINGZOU", "HANGZOU", "HENGZOU")
converter.get_all_first_letters("行走")  # Returns: ("XZ", "HZ")
```

## Error Handling

Nothing is surfaced to callers as failure:
- Characters outside the table (Latin, punctuation, CJK extensions) pass through unchanged
- When romanization is unavailable the whole string is a single opaque unit
- Corrupt table data raises `ValueError` at build/load time and is rebuilt or disabled

## Thread Safety

Tables and the availability flag are built once under a lock; after that every operation
is a read-only lookup over immutable data and may run concurrently from many threads.
"""

from __future__ import annotations
import itertools
import logging
import math
import pickle
import re
import threading
import time
import unicodedata
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import pypinyin
from pinyin_search.hanzi_to_pinyin_data import (
    BASE_CODEPOINT,
    TABLE_SIZE,
    LEGACY_PLACEHOLDER,
    LEGACY_PLACEHOLDER_SYLLABLE,
    TABLE_FORMAT_VERSION,
    VERBATIM_INDEX,
    PAYLOAD_KEYS,
    COMBINING_DIAERESIS,
    DEFAULT_UMLAUT_MARKER,
    PROBE_CHARACTER,
    SANITY_READINGS,
)

# Candidate syllables for one input character, canonical reading first (never empty)
CharacterCandidates = Tuple[str, ...]

# One CharacterCandidates per input character (or one for the whole pass-through string)
ResolvedString = Tuple[CharacterCandidates, ...]


# ════════════════════════════════════════════════════════════════════════════════
# CANDIDATE REFERENCES (tagged variant instead of magic indices)
# ════════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class SyllableRef:
    """Reference to one entry of the syllable table."""

    index: int


@dataclass(frozen=True)
class VerbatimMarker:
    """Candidate meaning "use the original character" - no confirmed reading."""


VERBATIM = VerbatimMarker()

CandidateRef = Union[SyllableRef, VerbatimMarker]


@dataclass(frozen=True)
class CacheInfo:
    """Immutable cache information structure."""

    cache_built: bool
    table_size: int
    syllable_count: int
    pickle_file_exists: bool
    pickle_file_size: Optional[int] = None
    pickle_file_mtime: Optional[float] = None


# ════════════════════════════════════════════════════════════════════════════════
# IMMUTABLE CONFIGURATION
# ════════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class HanziToPinyinConfig:
    """Immutable converter configuration."""

    # Persistent table cache
    cache_dir: Path
    cache_filename: str
    use_disk_cache: bool

    # None = probe the environment, True/False = force romanization on/off
    enabled: Optional[bool]

    # Code-point window covered by the candidate table
    base_codepoint: int
    table_size: int

    # 〇 resolves to a fixed syllable outside the table
    legacy_placeholder: str
    legacy_syllable: str

    # Replacement for the diaeresis of ü after tone stripping
    umlaut_marker: str

    # Characters that count as Chinese for is_chinese_words()
    han_pattern: re.Pattern[str]

    @classmethod
    def create_default(cls) -> "HanziToPinyinConfig":
        """Factory method to create the default configuration."""
        first = chr(BASE_CODEPOINT)
        last = chr(BASE_CODEPOINT + TABLE_SIZE - 1)

        return cls(
            cache_dir=Path.home() / ".cache" / "pinyin_search",
            cache_filename=f"pinyin_table_v{TABLE_FORMAT_VERSION}.pkl",
            use_disk_cache=True,
            enabled=None,
            base_codepoint=BASE_CODEPOINT,
            table_size=TABLE_SIZE,
            legacy_placeholder=LEGACY_PLACEHOLDER,
            legacy_syllable=LEGACY_PLACEHOLDER_SYLLABLE,
            umlaut_marker=DEFAULT_UMLAUT_MARKER,
            han_pattern=re.compile(f"[{first}-{last}{LEGACY_PLACEHOLDER}]"),
        )

    @property
    def cache_file(self) -> Path:
        return self.cache_dir / self.cache_filename

    def with_cache_dir(self, new_cache_dir: Path) -> "HanziToPinyinConfig":
        """Immutable update method."""
        return replace(self, cache_dir=new_cache_dir)

    def with_enabled(self, enabled: Optional[bool]) -> "HanziToPinyinConfig":
        """Force romanization on/off, or None to probe the environment."""
        return replace(self, enabled=enabled)

    def with_umlaut_marker(self, marker: str) -> "HanziToPinyinConfig":
        """Use another rendering for ü, e.g. "v" as typed on pinyin keyboards."""
        return replace(self, umlaut_marker=marker)

    def without_disk_cache(self) -> "HanziToPinyinConfig":
        return replace(self, use_disk_cache=False)


# ════════════════════════════════════════════════════════════════════════════════
# SYLLABLE / CANDIDATE TABLES
# ════════════════════════════════════════════════════════════════════════════════


def strip_tone(reading: str, umlaut_marker: str = DEFAULT_UMLAUT_MARKER) -> str:
    """Strip tone marks from a toned pinyin reading: "lǜ" -> "lu:", "hǎo" -> "hao"."""
    decomposed = unicodedata.normalize("NFD", reading.strip())
    chars = []
    for c in decomposed:
        if c == COMBINING_DIAERESIS:
            chars.append(umlaut_marker)
        elif not unicodedata.combining(c):
            chars.append(c)
    return "".join(chars).lower()


class PinyinTables:
    """
    Immutable syllable table plus dense per-code-point candidate table.

    The syllable table is an ordered, 0-indexed tuple of distinct syllables. The candidate
    table holds, for every offset from ``base_codepoint``, a non-empty tuple of
    ``SyllableRef``/``VERBATIM`` references with the canonical reading first.
    """

    __slots__ = ("_syllables", "_candidates", "_base_codepoint")

    def __init__(
        self,
        syllables: Sequence[str],
        candidates: Sequence[Sequence[CandidateRef]],
        base_codepoint: int = BASE_CODEPOINT,
    ):
        self._syllables: Tuple[str, ...] = tuple(syllables)
        self._candidates: Tuple[Tuple[CandidateRef, ...], ...] = tuple(tuple(entry) for entry in candidates)
        self._base_codepoint = base_codepoint
        self.validate()

    @classmethod
    def from_readings(
        cls,
        readings: Mapping[str, Sequence[str]],
        base_codepoint: int = BASE_CODEPOINT,
        table_size: int = TABLE_SIZE,
    ) -> "PinyinTables":
        """
        Build tables from a ``{character: [syllable, ...]}`` mapping.

        Characters of the window missing from ``readings`` (or mapped to an empty list)
        get a single VERBATIM candidate. Characters outside the window are rejected.
        """
        syllables = tuple(sorted({s for values in readings.values() for s in values if s}))
        index_of = {syllable: i for i, syllable in enumerate(syllables)}

        verbatim_entry: Tuple[CandidateRef, ...] = (VERBATIM,)
        candidates: List[Tuple[CandidateRef, ...]] = [verbatim_entry] * table_size

        for char, values in readings.items():
            offset = ord(char) - base_codepoint if len(char) == 1 else -1
            if not 0 <= offset < table_size:
                raise ValueError(f"Character {char!r} is outside the table window")
            refs = tuple(SyllableRef(index_of[s]) for s in values if s)
            candidates[offset] = refs or verbatim_entry

        return cls(syllables, candidates, base_codepoint)

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "PinyinTables":
        """Decode the serialized form produced by ``to_payload``."""
        syllables = payload["syllables"]
        encoded = payload["candidates"]
        base_codepoint = payload["base_codepoint"]
        if not isinstance(syllables, (tuple, list)) or not isinstance(encoded, (tuple, list)):
            raise ValueError("Malformed pinyin table payload")
        if not isinstance(base_codepoint, int):
            raise ValueError("Malformed pinyin table payload")

        for entry in encoded:
            if not isinstance(entry, (tuple, list)) or any(type(i) is not int for i in entry):
                raise ValueError(f"Malformed candidate entry {entry!r} in pinyin table payload")

        candidates = [tuple(VERBATIM if i == VERBATIM_INDEX else SyllableRef(i) for i in entry) for entry in encoded]
        return cls(syllables, candidates, base_codepoint)

    def to_payload(self, umlaut_marker: str) -> Dict[str, object]:
        """Serialize into plain tuples/ints, VERBATIM stored as ``VERBATIM_INDEX``."""
        return {
            "format_version": TABLE_FORMAT_VERSION,
            "pypinyin_version": pypinyin.__version__,
            "base_codepoint": self._base_codepoint,
            "table_size": len(self._candidates),
            "umlaut_marker": umlaut_marker,
            "syllables": self._syllables,
            "candidates": tuple(
                tuple(VERBATIM_INDEX if isinstance(ref, VerbatimMarker) else ref.index for ref in entry)
                for entry in self._candidates
            ),
        }

    def validate(self) -> None:
        """Reject corrupt data: non-string syllables, empty entries, references outside the syllable table."""
        for index, syllable in enumerate(self._syllables):
            if not isinstance(syllable, str) or not syllable:
                raise ValueError(f"Invalid syllable {syllable!r} at index {index}")

        syllable_count = len(self._syllables)
        for offset, entry in enumerate(self._candidates):
            if not entry:
                raise ValueError(f"Empty candidate list at offset {offset}")
            for ref in entry:
                if isinstance(ref, VerbatimMarker):
                    continue
                if not isinstance(ref, SyllableRef) or type(ref.index) is not int:
                    raise ValueError(f"Invalid syllable reference {ref!r} at offset {offset}")
                if not 0 <= ref.index < syllable_count:
                    raise ValueError(f"Invalid syllable reference {ref!r} at offset {offset}")

    @property
    def syllables(self) -> Tuple[str, ...]:
        return self._syllables

    @property
    def base_codepoint(self) -> int:
        return self._base_codepoint

    def __len__(self) -> int:
        return len(self._candidates)

    def syllable(self, index: int) -> str:
        return self._syllables[index]

    def candidates_at(self, offset: int) -> Optional[Tuple[CandidateRef, ...]]:
        """Raw candidate references at ``offset``, or None outside the table."""
        if 0 <= offset < len(self._candidates):
            return self._candidates[offset]
        return None

    def readings_for(self, ch: str) -> CharacterCandidates:
        """Candidate syllables for one character; the character itself when not covered."""
        entry = self.candidates_at(ord(ch) - self._base_codepoint)
        if entry is None:
            return (ch,)
        return tuple(ch if isinstance(ref, VerbatimMarker) else self._syllables[ref.index] for ref in entry)


def build_tables_from_pypinyin(config: HanziToPinyinConfig) -> PinyinTables:
    """Build tables for the configured window from pypinyin's single-character dictionary."""
    from pypinyin.pinyin_dict import pinyin_dict

    readings: Dict[str, List[str]] = {}
    for offset in range(config.table_size):
        codepoint = config.base_codepoint + offset
        raw = pinyin_dict.get(codepoint)
        if not raw:
            continue
        readings[chr(codepoint)] = [strip_tone(r, config.umlaut_marker) for r in raw.split(",")]

    tables = PinyinTables.from_readings(readings, config.base_codepoint, config.table_size)

    for char, expected in SANITY_READINGS.items():
        offset = ord(char) - config.base_codepoint
        if 0 <= offset < config.table_size and tables.readings_for(char)[0] != expected:
            raise ValueError(f"Unexpected canonical reading for {char}: {tables.readings_for(char)[0]!r}")

    return tables


# ════════════════════════════════════════════════════════════════════════════════
# CACHE MANAGEMENT SERVICE
# ════════════════════════════════════════════════════════════════════════════════


class TableCacheService:
    """Init-once table construction with persistent pickle storage."""

    def __init__(self, config: HanziToPinyinConfig, tables: Optional[PinyinTables] = None):
        self._config = config
        self._tables = tables
        # Injected tables are never rebuilt or dropped
        self._pinned = tables is not None
        self._lock = threading.Lock()

    @property
    def is_built(self) -> bool:
        return self._tables is not None

    @property
    def tables(self) -> Optional[PinyinTables]:
        return self._tables

    def get_cache_info(self) -> CacheInfo:
        """Get immutable cache information."""
        cache_file = self._config.cache_file
        tables = self._tables
        info_dict = {
            "cache_built": tables is not None,
            "table_size": len(tables) if tables is not None else 0,
            "syllable_count": len(tables.syllables) if tables is not None else 0,
            "pickle_file_exists": cache_file.exists(),
        }

        if cache_file.exists():
            try:
                stat = cache_file.stat()
                info_dict["pickle_file_size"] = stat.st_size
                info_dict["pickle_file_mtime"] = stat.st_mtime
            except OSError:
                pass

        return CacheInfo(**info_dict)

    def clear_cache(self) -> None:
        """Drop the in-memory tables and delete the pickle file."""
        with self._lock:
            if not self._pinned:
                self._tables = None

            cache_file = self._config.cache_file
            if cache_file.exists():
                try:
                    cache_file.unlink()
                    logging.info(f"Pinyin table cache {cache_file} cleared")
                except OSError as e:
                    logging.warning(f"Could not delete pinyin table cache: {e}")

    def build_cache(self, force_rebuild: bool = False) -> bool:
        """Build or load tables. Returns True if tables are available."""
        if self._tables is not None and (self._pinned or not force_rebuild):
            return True

        with self._lock:
            # Another thread may have finished while we waited
            if self._tables is not None and (self._pinned or not force_rebuild):
                return True

            cache_file = self._config.cache_file

            # Try loading from pickle first
            if self._config.use_disk_cache and cache_file.exists() and not force_rebuild:
                tables = self._load_from_pickle(cache_file)
                if tables is not None:
                    self._tables = tables
                    return True

            # Build from scratch
            return self._build_from_scratch(cache_file)

    def _load_from_pickle(self, cache_file: Path) -> Optional[PinyinTables]:
        """Load tables from pickle file; None when missing, stale or corrupt."""
        try:
            start_time = time.perf_counter()
            with cache_file.open("rb") as f:
                payload = pickle.load(f)

            if not self._payload_matches(payload):
                logging.info(f"Pinyin table cache {cache_file} is stale. Rebuilding...")
                return None

            tables = PinyinTables.from_payload(payload)
            load_time = time.perf_counter() - start_time
            logging.info(f"Loaded pinyin table for {len(tables)} characters in {load_time:.3f}s")
            return tables
        except Exception as e:
            logging.warning(f"Failed to load pinyin table cache: {e}. Rebuilding...")
            return None

    def _payload_matches(self, payload: object) -> bool:
        """Check the payload header against the current configuration and pypinyin version."""
        if not isinstance(payload, dict) or any(key not in payload for key in PAYLOAD_KEYS):
            return False
        return (
            payload["format_version"] == TABLE_FORMAT_VERSION
            and payload["pypinyin_version"] == pypinyin.__version__
            and payload["base_codepoint"] == self._config.base_codepoint
            and payload["table_size"] == self._config.table_size
            and payload["umlaut_marker"] == self._config.umlaut_marker
        )

    def _build_from_scratch(self, cache_file: Path) -> bool:
        """Build tables from pypinyin's dictionary."""
        try:
            start_time = time.perf_counter()
            tables = build_tables_from_pypinyin(self._config)
            build_time = time.perf_counter() - start_time
        except Exception as e:
            logging.error(f"Failed to build pinyin table: {e}")
            return False

        self._tables = tables
        logging.info(
            f"Built pinyin table for {len(tables)} characters "
            f"({len(tables.syllables)} syllables) in {build_time:.3f}s"
        )

        if self._config.use_disk_cache:
            self._save_to_pickle(cache_file, tables)
        return True

    def _save_to_pickle(self, cache_file: Path, tables: PinyinTables) -> None:
        """Save tables to pickle file."""
        try:
            cache_file.parent.mkdir(parents=True, exist_ok=True)
            with cache_file.open("wb") as f:
                pickle.dump(tables.to_payload(self._config.umlaut_marker), f, protocol=pickle.HIGHEST_PROTOCOL)
        except (pickle.PickleError, OSError) as e:
            logging.warning(f"Failed to save pinyin table cache: {e}")


# ════════════════════════════════════════════════════════════════════════════════
# AVAILABILITY GATE
# ════════════════════════════════════════════════════════════════════════════════


def probe_pinyin_resource() -> bool:
    """Check that pypinyin's single-character dictionary is importable and populated."""
    try:
        from pypinyin.pinyin_dict import pinyin_dict

        return bool(pinyin_dict.get(ord(PROBE_CHARACTER)))
    except Exception as e:
        logging.warning(f"Pinyin resource probe failed: {e}. Romanization disabled.")
        return False


class AvailabilityGate:
    """One-time capability check deciding whether romanization is applied at all."""

    def __init__(self, config: HanziToPinyinConfig, probe: Optional[Callable[[], bool]] = None):
        self._config = config
        self._probe = probe or probe_pinyin_resource
        self._available: Optional[bool] = None
        self._lock = threading.Lock()

    def is_available(self) -> bool:
        if self._available is None:
            with self._lock:
                if self._available is None:
                    self._available = self._evaluate()
        return self._available

    def mark_unavailable(self) -> None:
        """Degrade to pass-through for the rest of the process (e.g. table build failed)."""
        with self._lock:
            self._available = False

    def reset(self) -> None:
        """Forget the cached answer; the next is_available() evaluates again."""
        with self._lock:
            self._available = None

    def _evaluate(self) -> bool:
        if self._config.enabled is not None:
            return self._config.enabled
        try:
            return bool(self._probe())
        except Exception as e:
            logging.warning(f"Availability probe raised {e!r}. Romanization disabled.")
            return False


# ════════════════════════════════════════════════════════════════════════════════
# RESOLVERS
# ════════════════════════════════════════════════════════════════════════════════


class CodepointResolver:
    """Resolves a single character to its ordered candidate syllables."""

    def __init__(self, config: HanziToPinyinConfig, gate: AvailabilityGate, cache_service: TableCacheService):
        self._config = config
        self._gate = gate
        self._cache_service = cache_service

    def is_ready(self) -> bool:
        """Romanization is enabled and the tables are loaded."""
        if not self._gate.is_available():
            return False
        if self._cache_service.build_cache():
            return True
        self._gate.mark_unavailable()
        return False

    def resolve(self, ch: str) -> CharacterCandidates:
        """
        Candidate syllables for ``ch``, canonical first. Never empty.

        Anything that cannot be romanized (romanization unavailable, not a single
        character, outside the table) resolves to ``(ch,)``.
        """
        if len(ch) != 1 or not self.is_ready():
            return (ch,)

        if ch == self._config.legacy_placeholder:
            return (self._config.legacy_syllable,)

        tables = self._cache_service.tables
        if tables is None:
            return (ch,)
        return tables.readings_for(ch)


class StringResolver:
    """Maps a whole string to one CharacterCandidates entry per character."""

    def __init__(self, codepoint_resolver: CodepointResolver):
        self._codepoint_resolver = codepoint_resolver

    def resolve(self, s: Optional[str]) -> ResolvedString:
        text = s or ""
        if not text or not self._codepoint_resolver.is_ready():
            return ((text,),)
        return tuple(self._codepoint_resolver.resolve(ch) for ch in text)


# ════════════════════════════════════════════════════════════════════════════════
# CANONICAL FORMATTING (first candidate of every character)
# ════════════════════════════════════════════════════════════════════════════════


def full_pinyin(resolved: ResolvedString) -> str:
    """Concatenated canonical readings, uppercased: ``(("zhang",), ("san",))`` -> "ZHANGSAN"."""
    return "".join(candidates[0] for candidates in resolved).upper()


def first_letters(resolved: ResolvedString) -> str:
    """First letter of every canonical reading, uppercased."""
    return "".join(candidates[0][:1] for candidates in resolved).upper()


def split_pinyin(resolved: ResolvedString) -> List[str]:
    """Canonical reading per character, uppercased, keeping character boundaries."""
    return [candidates[0].upper() for candidates in resolved]


# ════════════════════════════════════════════════════════════════════════════════
# COMBINATORIAL EXPANSION (every polyphone combination)
# ════════════════════════════════════════════════════════════════════════════════


def iter_full_readings(resolved: ResolvedString) -> Iterator[str]:
    """
    Lazily yield every full reading, canonical (all first candidates) first.

    Yields ``prod(len(c) for c in resolved)`` strings; identical strings are yielded
    again when a candidate list repeats a syllable.
    """
    for combination in itertools.product(*resolved):
        yield "".join(combination).upper()


def iter_first_letters(resolved: ResolvedString) -> Iterator[str]:
    """Lazily yield every distinct first-letter acronym, canonical first."""
    # Distinct initials per character; equal initials would only produce duplicates
    initials = [tuple(dict.fromkeys(candidate[:1] for candidate in candidates)) for candidates in resolved]
    seen = set()
    for combination in itertools.product(*initials):
        acronym = "".join(combination).upper()
        if acronym not in seen:
            seen.add(acronym)
            yield acronym


def expand_full_readings(resolved: ResolvedString) -> Tuple[str, ...]:
    """All distinct full readings in enumeration order (canonical first)."""
    return tuple(dict.fromkeys(iter_full_readings(resolved)))


def expand_first_letters(resolved: ResolvedString) -> Tuple[str, ...]:
    """All distinct first-letter acronyms in enumeration order (canonical first)."""
    return tuple(iter_first_letters(resolved))


def expansion_size(resolved: ResolvedString) -> int:
    """Number of combinations the full expansion enumerates, without enumerating them."""
    return math.prod(len(candidates) for candidates in resolved)


# ════════════════════════════════════════════════════════════════════════════════
# MAIN CONVERTER CLASS
# ════════════════════════════════════════════════════════════════════════════════


class HanziToPinyin:
    """Main Han → pinyin conversion service."""

    def __init__(
        self,
        config: Optional[HanziToPinyinConfig] = None,
        tables: Optional[PinyinTables] = None,
        probe: Optional[Callable[[], bool]] = None,
    ):
        self._config = config or HanziToPinyinConfig.create_default()
        self._gate = AvailabilityGate(self._config, probe)
        self._cache_service = TableCacheService(self._config, tables)
        self._codepoint_resolver = CodepointResolver(self._config, self._gate, self._cache_service)
        self._string_resolver = StringResolver(self._codepoint_resolver)

    @property
    def config(self) -> HanziToPinyinConfig:
        return self._config

    def is_available(self) -> bool:
        """Whether romanization is applied (capability probe passed and tables loaded)."""
        return self._codepoint_resolver.is_ready()

    # Resolution
    def resolve_char(self, ch: str) -> CharacterCandidates:
        return self._codepoint_resolver.resolve(ch)

    def resolve_string(self, s: Optional[str]) -> ResolvedString:
        return self._string_resolver.resolve(s)

    # Canonical (single answer) output
    def get_full_pinyin(self, s: Optional[str]) -> str:
        return full_pinyin(self.resolve_string(s))

    def get_first_letters(self, s: Optional[str]) -> str:
        return first_letters(self.resolve_string(s))

    def get_split_pinyin(self, s: Optional[str]) -> List[str]:
        return split_pinyin(self.resolve_string(s))

    # Exhaustive output
    def get_all_full_pinyin(self, s: Optional[str]) -> Tuple[str, ...]:
        return expand_full_readings(self.resolve_string(s))

    def get_all_first_letters(self, s: Optional[str]) -> Tuple[str, ...]:
        return expand_first_letters(self.resolve_string(s))

    def is_chinese_words(self, s: Optional[str]) -> bool:
        """
        Whether ``s`` contains at least one character covered by the pinyin table.

        Classifies the text only; the answer does not depend on is_available(), so it stays
        True for Chinese text even while lookups pass input through unchanged.
        """
        return bool(s) and self._config.han_pattern.search(s) is not None

    def is_first_chinese_words(self, s: Optional[str]) -> bool:
        """Whether the first character of ``s`` is covered by the pinyin table (independent of is_available())."""
        return bool(s) and self._config.han_pattern.match(s) is not None

    # Cache management
    def get_cache_info(self) -> CacheInfo:
        return self._cache_service.get_cache_info()

    def clear_pinyin_cache(self) -> None:
        self._cache_service.clear_cache()

    def rebuild_pinyin_cache(self) -> bool:
        """
        Force rebuild of the pinyin table.

        A successful rebuild re-enables romanization disabled by an earlier failed build
        (unless the config or the availability check turns it off). Returns whether romanization is now applied.
        """
        if not self._cache_service.build_cache(force_rebuild=True):
            self._gate.mark_unavailable()
            return False
        self._gate.reset()
        return self.is_available()


def run_performance_test() -> None:
    """Run conversion benchmark over random mixed Han/Latin strings."""
    import random

    converter = HanziToPinyin()

    start = time.perf_counter()
    available = converter.is_available()
    print(f"Table ready={available} in {time.perf_counter() - start:.3f}s")

    def generate_test_strings(count: int) -> List[str]:
        strings = []
        for _ in range(count):
            length = random.randint(1, 6)
            chars = []
            for _ in range(length):
                if random.random() < 0.85:
                    chars.append(chr(BASE_CODEPOINT + random.randrange(TABLE_SIZE)))
                else:
                    chars.append(random.choice("ABCDEFGHIJKLMNOPQRSTUVWXYZ "))
            strings.append("".join(chars))
        return strings

    test_strings = generate_test_strings(10000)

    start = time.perf_counter()
    for s in test_strings:
        converter.get_full_pinyin(s)
        converter.get_first_letters(s)
    canonical_time = time.perf_counter() - start

    start = time.perf_counter()
    total_readings = 0
    max_readings = 0
    for s in test_strings:
        count = len(converter.get_all_full_pinyin(s))
        converter.get_all_first_letters(s)
        total_readings += count
        max_readings = max(max_readings, count)
    expansion_time = time.perf_counter() - start

    n = len(test_strings)
    print(f"Canonical: {canonical_time / n * 1000:.4f}ms per string")
    print(f"Expansion: {expansion_time / n * 1000:.4f}ms per string")
    print(f"Readings per string: avg {total_readings / n:.2f}, max {max_readings}")

    for sample in ("张三", "中国", "行走", "A好", "重庆银行"):
        print(
            f"  {sample} -> {converter.get_full_pinyin(sample)} / {converter.get_first_letters(sample)} "
            f"/ {converter.get_all_full_pinyin(sample)}"
        )


# ════════════════════════════════════════════════════════════════════════════════
# MODULE-LEVEL CONVENIENCE FUNCTIONS
# ════════════════════════════════════════════════════════════════════════════════

# Global converter instance for module-level functions
_global_converter: Optional[HanziToPinyin] = None
_global_lock = threading.Lock()


def get_instance() -> HanziToPinyin:
    """Get or create the global converter instance."""
    global _global_converter
    if _global_converter is None:
        with _global_lock:
            if _global_converter is None:
                _global_converter = HanziToPinyin()
    return _global_converter


def get_full_pinyin(s: Optional[str]) -> str:
    """Uppercase concatenated canonical pinyin, e.g. "张三" -> "ZHANGSAN"."""
    return get_instance().get_full_pinyin(s)


def get_first_letters(s: Optional[str]) -> str:
    """Uppercase first-letter acronym, e.g. "张三" -> "ZS"."""
    return get_instance().get_first_letters(s)


def get_split_pinyin(s: Optional[str]) -> List[str]:
    return get_instance().get_split_pinyin(s)


def get_all_full_pinyin(s: Optional[str]) -> Tuple[str, ...]:
    return get_instance().get_all_full_pinyin(s)


def get_all_first_letters(s: Optional[str]) -> Tuple[str, ...]:
    return get_instance().get_all_first_letters(s)


def is_chinese_words(s: Optional[str]) -> bool:
    return get_instance().is_chinese_words(s)


def is_first_chinese_words(s: Optional[str]) -> bool:
    return get_instance().is_first_chinese_words(s)


def clear_cache() -> None:
    """Clear the global pinyin table cache."""
    get_instance().clear_pinyin_cache()


def get_cache_info() -> Dict[str, Union[bool, int, float, None]]:
    """Get cache information as a dictionary."""
    cache_info = get_instance().get_cache_info()
    return {
        "cache_built": cache_info.cache_built,
        "table_size": cache_info.table_size,
        "syllable_count": cache_info.syllable_count,
        "pickle_file_exists": cache_info.pickle_file_exists,
        "pickle_file_size": cache_info.pickle_file_size,
        "pickle_file_mtime": cache_info.pickle_file_mtime,
    }


# CLI entry point
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run_performance_test()
