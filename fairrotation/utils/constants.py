"""
Constants for the Fair Rotation scheduling engine.

This module contains configuration constants used throughout the engine:
field formats, formations, squad limits and the role balancing thresholds.
"""

# Application metadata
APP_TITLE = "Fair Rotation"

# Field formats
FORMAT_5V5 = "5v5"
FORMAT_7V7 = "7v7"

# Tactical formations
FORMATION_2_2 = "2-2"
FORMATION_1_2_1 = "1-2-1"
FORMATION_2_2_2 = "2-2-2"
FORMATION_2_3_1 = "2-3-1"

# Formations available per format
FORMAT_CONFIGS = {
    FORMAT_5V5: {
        "formations": [FORMATION_2_2, FORMATION_1_2_1],
    },
    FORMAT_7V7: {
        "formations": [FORMATION_2_2_2, FORMATION_2_3_1],
    },
}

# Squad size limits
GOALIE_COUNT = 1
MIN_SQUAD_SIZE = 5
DEFAULT_MAX_SQUAD_SIZE = 15
MAX_SQUAD_SIZE_BY_FORMAT = {
    FORMAT_5V5: 11,
    FORMAT_7V7: 15,
}

# Position keys
GOALIE_POSITION = "goalie"
SUBSTITUTE_POSITION_PREFIX = "substitute_"
LEFT_PAIR = "leftPair"
RIGHT_PAIR = "rightPair"
SUB_PAIR = "subPair"
FIELD_PAIR_POSITIONS = (LEFT_PAIR, RIGHT_PAIR)

# Paired substitution is only offered for this shape
PAIRED_FORMAT = FORMAT_5V5
PAIRED_FORMATION = FORMATION_2_2
MIN_PAIRED_SQUAD_SIZE = 7

# Required-role thresholds on (defender + 1) / (attacker + 1).
# Asymmetric; do not symmetrize.
REQUIRED_DEFENDER_RATIO = 0.8
REQUIRED_ATTACKER_RATIO = 1.25

# Paired mode switches to strict role balancing in this period
BALANCED_PAIR_PERIOD = 3

# Post-match role points
ROLE_POINTS_TOTAL = 3
ROLE_POINTS_STEP = 0.5

# Fairness reporting
FAIRNESS_THRESHOLD_SECONDS = 120  # +/- 2 minutes regarded as notable variance
FAIRNESS_ORDER = {"under": 0, "ok": 1, "over": 2}

# Deficit values closer than this are treated as ties
DEFICIT_TIE_TOLERANCE = 0.01
