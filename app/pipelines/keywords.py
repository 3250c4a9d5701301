"""
Classification Tables for the Career Pipeline
app/pipelines/keywords.py

Cluster keywords, education levels, salary tiers and stop words.
Tables are ordered: iteration order is the tie-break order.
"""

from __future__ import annotations

# Industry clusters (name, keywords). Order decides ties: the first
# cluster with the highest score wins.
CLUSTER_KEYWORDS = (
    ("healthcare", (
        "nurse", "doctor", "physician", "therapist", "dental", "medical",
        "health", "hygienist", "assistant", "pharmacist", "veterinarian",
        "surgeon", "anesthesiologist", "radiologist", "sonographer",
        "phlebotomist", "emergency", "patient", "clinical",
    )),
    ("technology", (
        "software", "developer", "programmer", "engineer", "web", "data",
        "information", "security", "analyst", "computer", "technology",
        "tech", "digital", "coding", "systems", "database", "network",
        "cybersecurity", "it",
    )),
    ("engineering", (
        "engineer", "mechanical", "civil", "electrical", "aerospace",
        "chemical", "petroleum", "industrial", "robotics", "manufacturing",
        "structural", "construction", "design", "technical",
    )),
    ("education", (
        "teacher", "educator", "professor", "instructor", "librarian",
        "school", "elementary", "secondary", "education", "training",
        "academic", "tutor",
    )),
    ("business", (
        "manager", "accountant", "analyst", "financial", "marketing",
        "sales", "business", "executive", "director", "consultant",
        "administrator", "human resources", "hr", "loan officer",
        "real estate", "broker", "event planner",
    )),
    ("trades", (
        "electrician", "plumber", "welder", "mechanic", "technician", "hvac",
        "carpenter", "construction", "installer", "repair", "maintenance",
        "automotive", "service",
    )),
    ("arts", (
        "designer", "artist", "graphic", "photographer", "fashion",
        "interior", "creative", "visual", "architect", "illustrator",
        "animator",
    )),
    ("legal", (
        "lawyer", "attorney", "paralegal", "legal", "counsel", "judge",
        "law", "court",
    )),
    ("science", (
        "scientist", "chemist", "biologist", "physicist", "researcher",
        "laboratory", "research", "zoologist", "wildlife", "environmental",
    )),
    ("service", (
        "chef", "cook", "hairdresser", "stylist", "cosmetologist", "cashier",
        "teller", "service", "hospitality", "food", "customer service",
    )),
    ("protective", (
        "police", "officer", "firefighter", "security", "detective",
        "law enforcement", "emergency", "safety", "corrections",
    )),
    ("social", (
        "social worker", "counselor", "psychologist", "therapist",
        "community", "family", "case manager", "mental health",
    )),
    ("media", (
        "producer", "director", "actor", "writer", "author", "journalist",
        "editor", "broadcaster", "media", "entertainment", "film",
    )),
    ("transportation", (
        "pilot", "air traffic", "controller", "driver", "transportation",
        "logistics", "dispatcher",
    )),
    ("agriculture", (
        "farmer", "agricultural", "agriculture", "farm", "crop", "livestock",
    )),
)

DEFAULT_CLUSTER = "other"

CLUSTER_METADATA = {
    "healthcare": {"label": "Healthcare", "description": "Medical and health services", "icon": "🏥"},
    "technology": {"label": "Technology", "description": "Computer and information technology", "icon": "💻"},
    "engineering": {"label": "Engineering", "description": "Engineering and technical design", "icon": "⚙️"},
    "education": {"label": "Education", "description": "Teaching and training", "icon": "📚"},
    "business": {"label": "Business", "description": "Business and financial operations", "icon": "💼"},
    "trades": {"label": "Skilled Trades", "description": "Skilled trades and technical work", "icon": "🔧"},
    "arts": {"label": "Arts & Design", "description": "Creative and design fields", "icon": "🎨"},
    "legal": {"label": "Legal", "description": "Legal services", "icon": "⚖️"},
    "science": {"label": "Science", "description": "Scientific research and analysis", "icon": "🔬"},
    "service": {"label": "Service", "description": "Customer and personal services", "icon": "🍽️"},
    "protective": {"label": "Protective Services", "description": "Public safety and security", "icon": "👮"},
    "social": {"label": "Social Services", "description": "Social and human services", "icon": "🤝"},
    "media": {"label": "Media & Entertainment", "description": "Media, entertainment, and communications", "icon": "🎬"},
    "transportation": {"label": "Transportation", "description": "Transportation and logistics", "icon": "✈️"},
    "agriculture": {"label": "Agriculture", "description": "Agriculture and natural resources", "icon": "🌾"},
    "other": {"label": "Other", "description": "Other occupations", "icon": "📋"},
}

# Salary tiers: upper bounds are exclusive
SALARY_TIER_THRESHOLDS = (
    ("entry", 40000),
    ("mid", 70000),
    ("upper-mid", 100000),
)
TOP_SALARY_TIER = "high"

SALARY_TIER_METADATA = {
    "entry": {
        "label": "Entry Level", "min": 0, "max": 40000,
        "description": "Entry-level positions, typically requiring less experience",
    },
    "mid": {
        "label": "Mid Range", "min": 40000, "max": 70000,
        "description": "Mid-range positions, typically requiring moderate experience",
    },
    "upper-mid": {
        "label": "Upper Mid Range", "min": 70000, "max": 100000,
        "description": "Upper mid-range positions, typically requiring significant experience",
    },
    "high": {
        "label": "High Salary", "min": 100000, "max": None,
        "description": "High-salary positions, typically requiring advanced education/experience",
    },
}

# Education levels (level, key, label, keywords). First substring match wins.
EDUCATION_LEVELS = (
    (1, "high_school", "High School Diploma", ("high school", "diploma", "ged", "no formal")),
    (2, "postsecondary", "Postsecondary Nondegree Award", ("postsecondary", "certificate", "award", "some college")),
    (3, "associate", "Associate's Degree", ("associate",)),
    (4, "bachelor", "Bachelor's Degree", ("bachelor",)),
    (5, "master", "Master's Degree", ("master",)),
    (6, "doctoral", "Doctoral or Professional Degree", ("doctoral", "doctorate", "phd", "professional degree", "md", "jd")),
)
UNKNOWN_EDUCATION = (0, "unknown", "Unknown")

# Words ignored by keyword extraction
STOP_WORDS = frozenset([
    "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with",
    "a", "an", "as", "by", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "must", "can", "this", "that", "these",
    "those", "from", "into",
])

# Fallback skills when the skills table has no entry
SYNTHETIC_SKILLS = (
    "Communication",
    "Problem-solving",
    "Teamwork",
    "Critical thinking",
    "Time management",
)
