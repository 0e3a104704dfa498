# config.py — tuned defaults

# Weights
BENEFIT_WEIGHT = 10            # benefit tag contains a keyword / target benefit
TEXT_WEIGHT = 3                # name + scientific name + description
COMPONENT_WEIGHT = 1           # active components
FALLBACK_SCORE = 1             # flat score for name-only fallback matches

# Limits
MAX_RESULTS = 10
MAX_FALLBACK_RESULTS = 5
MAX_MATCHED_BENEFITS = 3

# Keyword filtering
MIN_KEYWORD_LENGTH = 1         # 1 = keep every token; 4 drops tokens of length <= 3
MIN_FRAGMENT_LENGTH = 3        # shortest keyword allowed to match *inside* a condition or plant name

# UI "High Match" badge
HIGH_MATCH_THRESHOLD = 15

# Catalog ingestion: separators for list fields given as one string
COMPONENT_DELIMITERS = r"[,;|\n]"
TEXT_LIST_DELIMITERS = r"[;|\n]"     # usage methods / precautions may contain commas

# Suggestions
GENERAL_SUGGESTIONS = [
    "Try being more specific about symptoms",
    "Include the affected body part or system",
    "Mention if it's acute or chronic",
    "Add any other related health concerns",
]
SPECIFIC_TERMS_SUGGESTIONS = [
    "Try using more specific health terms",
    'Example: "diabetes", "high blood pressure", "stomach pain"',
]
FALLBACK_SUGGESTIONS = [
    "Try more specific health terms",
    "Consider using common names for conditions",
    'Example: "diabetes", "high blood pressure", "stomach pain"',
]
CATALOG_EMPTY_SUGGESTIONS = [
    "Try uploading plant data first",
    "Use more specific health terms",
]
