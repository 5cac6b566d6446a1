"""Application-wide constants.

This module centralizes the fixed thresholds and lookup boundaries used by
the context analyzer and the adaptation engine. Values that need to be
configurable at runtime should go in config.py instead.
"""

# ===================
# Cache Keys
# ===================

# Decimal places used to bucket coordinates into cache keys
WEATHER_CACHE_PRECISION = 2  # ~1 km
LOCATION_CACHE_PRECISION = 3  # ~100 m

# Number of recent activities that must agree for the consistency bonus
ACTIVITY_CONSISTENCY_WINDOW = 3


# ===================
# Activity Inference
# ===================

# Walking slower than this near landmarks counts as sightseeing (km/h)
SIGHTSEEING_MAX_SPEED_KMH = 4.0

# Stationary minutes while walking in a city that suggests browsing shops
SHOPPING_MIN_STATIONARY_MINUTES = 5

# Stationary minutes during daytime that suggests work
WORK_MIN_STATIONARY_MINUTES = 30


# ===================
# Attention Scoring
# ===================

ATTENTION_BASE_SCORE = 0.5
ATTENTION_LOW_THRESHOLD = 0.3
ATTENTION_HIGH_THRESHOLD = 0.7


# ===================
# Environment Classification
# ===================

# Altitude above which a location is treated as mountain terrain (meters)
MOUNTAIN_MIN_ALTITUDE_M = 500

# Latitude north of which the simplified classifier assumes coastline
COASTAL_MIN_LATITUDE = 60.5


# ===================
# Content Transformation
# ===================

# Sentence scoring
POSITION_BONUS_RATIO = 0.2  # first/last 20% of sentences
MIN_PREFERRED_SENTENCE_WORDS = 8
MAX_PREFERRED_SENTENCE_WORDS = 20
KEYWORD_DENSITY_LIMIT = 0.3

# Fraction of sentences that become interaction points at full interaction level
INTERACTION_DENSITY = 0.3

# Interaction point type selection. A draw from the injected random source
# above the threshold picks the type, so CHOICE fires with probability 0.5
# and QUESTION with probability 0.3.
CHOICE_DRAW_THRESHOLD = 0.5
QUESTION_DRAW_THRESHOLD = 0.7

# Length categories: (max words, max seconds) per category, first match wins
MICRO_MAX_WORDS, MICRO_MAX_SECONDS = 50, 30
SHORT_MAX_WORDS, SHORT_MAX_SECONDS = 150, 90
MEDIUM_MAX_WORDS, MEDIUM_MAX_SECONDS = 400, 240
LONG_MAX_WORDS, LONG_MAX_SECONDS = 800, 480

# Lexical quality penalty when adapted/original length ratio leaves this band
MAX_LENGTH_RATIO = 1.5
MIN_LENGTH_RATIO = 0.1
LENGTH_RATIO_PENALTY = 0.3


# ===================
# Recommendations
# ===================

MIN_RELEVANCE_SCORE = 0.3
GEOFENCE_RELEVANCE_BONUS = 0.4
DEFAULT_MAX_RECOMMENDATIONS = 5

# Confidence assigned to cheap recommendation previews
QUICK_ADAPTATION_CONFIDENCE = 0.6
QUICK_ADAPTATION_CONTEXT = "quick_adaptation"


# ===================
# Geography
# ===================

EARTH_RADIUS_M = 6371000
