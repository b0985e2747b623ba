"""CLI script to audit a vocabulary file for repeats. Run with: python check_duplicates.py [vocabulary.json]"""

import sys

from flashcard_app.config import settings
from flashcard_app.services.import_service import find_seed_duplicates, load_vocabulary_file


def _describe(entry: dict) -> str:
    return (
        f"{entry.get('english')} -> {entry.get('japaneseKanji')} "
        f"({entry.get('hiragana')}) [{entry.get('category')}]"
    )


def check_duplicates(path: str) -> int:
    entries = load_vocabulary_file(path)
    print(f"Total entries: {len(entries)}\n")

    dup_english, dup_japanese = find_seed_duplicates(entries)

    if dup_english:
        print("=== Duplicate English Terms ===")
        for term, indices in dup_english.items():
            print(f'\n"{term}" appears {len(indices)} times:')
            for i in indices:
                print(f"  [{i}] {_describe(entries[i])}")
    else:
        print("No duplicate English terms found")

    print()

    if dup_japanese:
        print("=== Duplicate Japanese Terms ===")
        for pair, indices in dup_japanese.items():
            kanji, kana = pair.split("|", 1)
            print(f'\n"{kanji} ({kana})" appears {len(indices)} times:')
            for i in indices:
                print(f"  [{i}] {_describe(entries[i])}")
    else:
        print("No duplicate Japanese terms found")

    print("\n=== Summary ===")
    print(f"Total entries: {len(entries)}")
    print(f"Duplicate English: {len(dup_english)}")
    print(f"Duplicate Japanese: {len(dup_japanese)}")
    return len(dup_english) + len(dup_japanese)


if __name__ == "__main__":
    if len(sys.argv) > 2:
        print("Usage: python check_duplicates.py [vocabulary.json]")
        sys.exit(1)
    found = check_duplicates(sys.argv[1] if len(sys.argv) == 2 else settings.seed_vocabulary_path)
    sys.exit(1 if found else 0)
