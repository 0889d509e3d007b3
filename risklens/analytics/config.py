# risklens/analytics/config.py

# Shingle length for text similarity
SHINGLE_SIZE = 3

# Characters kept after lowercasing: latin letters, digits and the Thai block
SHINGLE_KEEP_PATTERN = r"[^\u0e00-\u0e7fa-z0-9]"

# Near-duplicate detection
DUPLICATE_SIMILARITY_THRESHOLD = 0.3  # strictly greater than
DUPLICATE_MAX_RESULTS = 3

# Pairwise correlation weights (sum to 1.0, never renormalized)
CORRELATION_WEIGHTS = {
    "same_business_unit": 0.3,
    "score_similarity": 0.2,
    "text_similarity": 0.3,
    "temporal": 0.2,
}
MAX_SCORE_SPREAD = 25  # score proximity fully decays at this spread
TEMPORAL_WINDOW_DAYS = 30  # dates this far apart contribute nothing

# Network building
NETWORK_EDGE_THRESHOLD = 0.4  # strictly greater than
SIMILAR_SEVERITY_SPREAD = 5  # |scoreA - scoreB| below this is "similar severity"

# Cascade discovery
CASCADE_CORRELATION_THRESHOLD = 0.6
CASCADE_MIN_SCORE = 15

# Risk velocity bands
VELOCITY_INCREASING_SCORE = 20
VELOCITY_STABLE_SCORE = 15

# Risk level bands by score (likelihood * impact)
RISK_LEVEL_THRESHOLDS = {
    "Critical": 21,
    "High": 13,
    "Medium": 7,
    "Low": 1,
}

# Force-directed layout
LAYOUT_PARAMS = {
    "center_force": 0.05 * 0.1,
    "repel_force": 2000.0,
    "link_distance": 100.0,
    "link_strength": 0.1,
    "damping": 0.9,
    "margin": 30.0,
    "initial_spread": 200.0,
}
NETWORK_CRITICAL_SCORE = 20

# Executive decision queue: active risks at or above the critical threshold,
# then the elevated band below it, then a few low-score active issues
DECISION_CRITICAL_SCORE = 20  # default; the API passes the configured critical_risk_threshold
DECISION_WARNING_SCORE = 15
DECISION_MAX_NORMAL_ISSUES = 3
DECISION_DEADLINES = {
    "critical": "Within 24 hours",
    "warning": "Within 1 week",
    "normal": "Ongoing",
}

# Weekly summary
WEEKLY_CRITICAL_SCORE = 15  # score >= this counts as critical in the weekly view
WEEKLY_TOP_CRITICAL = 5

# Tone lexicons: (keywords, per-hit delta). Thai first, English equivalents after.
SENTIMENT_LEXICONS = {
    "panic": (
        [
            "แน่นอน", "จะต้อง", "หนักมาก", "วิกฤต", "เสียหายมหาศาล", "พัง", "ล่มสลาย",
            "crisis", "catastrophic", "disaster", "collapse", "meltdown",
        ],
        -0.4,
    ),
    "urgent": (
        [
            "ด่วน", "เร่งด่วน", "ต้องการ", "ขาดแคลน", "ปัญหาใหญ่", "กระทบหนัก",
            "urgent", "asap", "immediately", "shortage", "severe impact",
        ],
        -0.3,
    ),
    "concerned": (
        [
            "กังวล", "ไม่แน่ใจ", "อาจจะ", "เสี่ยง", "น่าเป็นห่วง", "ระวัง",
            "concerned", "worried", "not sure", "uncertain", "watch out",
        ],
        -0.15,
    ),
    "confident": (
        [
            "รับมือได้", "มีแผน", "ควบคุมได้", "ปกติ", "ไม่น่ากังวล", "จัดการแล้ว",
            "under control", "have a plan", "mitigated", "on track", "handled",
        ],
        0.2,
    ),
}

EXCLAMATION_FREE_COUNT = 2  # more than this many "!" is penalised
EXCLAMATION_PENALTY = 0.1  # per "!"
QUESTION_PENALTY = 0.05  # per "?"
CAPS_RATIO_THRESHOLD = 0.3
CAPS_PENALTY = 0.2
MAX_SENTIMENT_KEYWORDS = 5

# Score thresholds, evaluated in this order
SENTIMENT_THRESHOLDS = {
    "panic": -0.6,  # score <= -0.6
    "urgent": -0.3,  # score <= -0.3
    "concerned": -0.1,  # score <= -0.1
    "confident": 0.2,  # score >= 0.2
}

SENTIMENT_ACTIONS = {
    "panic": "ต้องรีบติดต่อเจ้าของ risk ทันที - อาจต้อง escalate ถึง CEO",
    "urgent": "นัด meeting ภายใน 24 ชม. เพื่อวางแผนรับมือ",
    "concerned": "ติดตามใกล้ชิด ขอ update ทุกสัปดาห์",
    "neutral": "ติดตามตามปกติ",
    "confident": "บันทึกไว้ ไม่ต้องติดตามบ่อย",
}

# Risk vs issue keyword classification
ISSUE_KEYWORDS = [
    "happened", "occurred", "broke", "failed", "is happening", "outage",
    "crash", "stopped", "resigned", "breach", "overrun",
]
RISK_KEYWORDS = [
    "might", "could", "may", "potential", "risk of", "possible", "forecast",
    "future", "coming", "expecting", "threat",
]
