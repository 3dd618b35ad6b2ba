#!/usr/bin/env python3
"""
Prebuild the serialized pinyin table so the first lookup in a process only has to unpickle it.

Usage:
  python scripts/build_pinyin_table.py                   # default cache dir (~/.cache/pinyin_search)
  python scripts/build_pinyin_table.py --cache-dir data  # ship the table next to the app
  python scripts/build_pinyin_table.py --force           # ignore an existing table
"""

import argparse
import logging
import sys
from pathlib import Path

from pinyin_search.hanzi_to_pinyin import HanziToPinyin, HanziToPinyinConfig

SAMPLES = ["张三", "中国", "行走", "重庆银行", "A好", "〇"]


def main() -> int:
    parser = argparse.ArgumentParser(description="Build the Han -> pinyin candidate table cache.")
    parser.add_argument("--cache-dir", type=Path, default=None, help="Directory for the pickled table.")
    parser.add_argument("--umlaut-marker", default=None, help='Rendering of u-umlaut (default ":", e.g. "v").')
    parser.add_argument("--force", action="store_true", help="Rebuild even if a valid table exists.")
    parser.add_argument("--samples", nargs="*", default=SAMPLES, help="Strings to convert after building.")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    config = HanziToPinyinConfig.create_default().with_enabled(True)
    if args.cache_dir is not None:
        config = config.with_cache_dir(args.cache_dir)
    if args.umlaut_marker is not None:
        config = config.with_umlaut_marker(args.umlaut_marker)

    converter = HanziToPinyin(config)
    ok = converter.rebuild_pinyin_cache() if args.force else converter.is_available()
    if not ok:
        print("ERROR: pinyin table could not be built", file=sys.stderr)
        return 1

    info = converter.get_cache_info()
    print(f"Table: {info.table_size} characters, {info.syllable_count} syllables")
    print(f"Cache file: {config.cache_file} ({info.pickle_file_size} bytes)")

    for sample in args.samples:
        print(
            f"  {sample} -> {converter.get_full_pinyin(sample)}"
            f" | {converter.get_first_letters(sample)}"
            f" | all: {', '.join(converter.get_all_full_pinyin(sample))}"
            f" | acronyms: {', '.join(converter.get_all_first_letters(sample))}"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
