# run.py
import argparse
import json
import logging
import sys

from remedy.matching.datastore import CatalogError, PlantCatalog
from remedy.matching.matcher import Matcher
from remedy.matching.vocabulary import DEFAULT_VOCABULARY, VocabularyError, load_vocabulary

# ---------------------------
# CONFIG
# ---------------------------
DEFAULT_CATALOG = "remedy/data/plants.json"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"

logger = logging.getLogger("remedy")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search a plant remedy catalog for a health complaint.")
    parser.add_argument("query", help='free-text complaint, e.g. "my joints hurt with arthritis"')
    parser.add_argument("--catalog", default=DEFAULT_CATALOG, help="plant catalog (.json or .csv)")
    parser.add_argument("--vocabulary", default=None, help="vocabulary JSON replacing the built-in rules")
    parser.add_argument("--min-keyword-length", type=int, default=None,
                        help="drop keywords shorter than this (default: keep all)")
    parser.add_argument("--insights-only", action="store_true",
                        help="only print keywords / conditions / target benefits")
    parser.add_argument("-v", "--verbose", action="store_true", help="log pipeline details to stderr")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    try:
        vocabulary = load_vocabulary(args.vocabulary) if args.vocabulary else DEFAULT_VOCABULARY
    except (FileNotFoundError, VocabularyError):
        logger.exception("Failed to load vocabulary.")
        return 2

    matcher = Matcher(vocabulary, args.min_keyword_length)

    if args.insights_only:
        print(json.dumps(matcher.analyze(args.query).to_insights(), indent=2))
        return 0

    catalog = PlantCatalog()
    try:
        catalog.load(args.catalog)
    except (FileNotFoundError, CatalogError):
        logger.exception("Failed to load plant catalog.")
        return 2

    response = matcher.search(args.query, catalog)
    logger.info(f"Extracted keywords: {', '.join(response.context.keywords)}")
    logger.info(f"Returning {len(response.results)} matches")
    print(json.dumps(response.to_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
