"""Closed vocabularies used by trade records."""

PAIRS = ("NQ", "ES", "EU")
SESSIONS = ("Asia", "London", "Pre-NY", "NY")
CRTS = ("Daily", "4H", "1H", "M30", "M15")
ENTRY_TYPES = ("Risk Entry", "Confirmation Entry")
RISK_LEVELS = ("0.25%", "0.5%", "1%")
RATINGS = ("A", "B", "C")
RESULTS = ("Win", "Loss", "Small Win", "Small Loss")

WINNING_RESULTS = frozenset({"Win", "Small Win"})
LOSING_RESULTS = frozenset({"Loss", "Small Loss"})

POI_FVG = ("Daily FVG", "4H FVG", "1H FVG", "M30 FVG", "M15 FVG")
POI_OB = ("Daily OB", "4H OB", "1H OB", "M30 OB", "M15 OB")
POI_OTHER = (
    "Rejection Block (RB)",
    "Midnight Open",
    "Weekly Open",
    "Standard Deviation",
    "PSL",
    "PSH",
    "PDH",
    "PDL",
)

# Confluence vocabulary per POI category
POI_VOCABULARY = {
    "fvg": POI_FVG,
    "ob": POI_OB,
    "other": POI_OTHER,
}

SMT_TYPES = ("HTF SMT", "LTF SMT", "HTF OB SMT", "Midnight SMT")

# Review lists that only support append and remove-by-position
REVIEW_LIST_FIELDS = ("mistakes", "whatWentWell", "whatWentWrong")
