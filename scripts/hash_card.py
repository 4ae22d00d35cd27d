"""Print the stored marker for a card UID.

Usage: python scripts/hash_card.py <uid>
"""

from __future__ import annotations

import sys

import _settings  # noqa: F401

from access_directory.common.hashing import card_marker


def main() -> None:
    if len(sys.argv) != 2 or not sys.argv[1].strip():
        raise SystemExit(__doc__.strip())
    print(card_marker(sys.argv[1]))


if __name__ == "__main__":
    main()
