import os

APP_TITLE = "Creativity League"

# -----------------------------
# Time
# -----------------------------

# 1 virtual day per 5 real seconds
SPEED_MULTIPLIER = 86400 / 5
TICK_SECONDS = 1

# -----------------------------
# Competitors
# -----------------------------

CATCH_UP_REWARD = 3
# install day is only rolled if the app is first opened after this hour
SUPPRESS_BEFORE_HOUR = 12

COMPETITOR_NAMES = [
    "Creative Spark", "Pixel Pioneer", "Idea Forge", "Art Maven",
    "Design Wizard", "Craft Master", "Vision Seeker", "Muse Hunter",
    "Color Alchemist", "Form Shaper", "Story Weaver", "Rhythm Maker",
    "Canvas Dancer", "Mind Sculptor", "Dream Builder", "Skill Crafter",
    "Pattern Finder", "Concept Artist", "Flow State",
]
PROBABILITY_STEP = 0.05

# -----------------------------
# Prompts & weekly tasks
# -----------------------------

PROMPT_POOLS = {
    1: [
        "Write a short poem about your day",
        "Sketch the view from your window",
        "Write a letter to your future self",
        "Describe a memory using only smells and sounds",
    ],
    2: [
        "Draw a picture in 30 minutes",
        "Invent a recipe combining unusual ingredients",
        "Design a dream vacation itinerary",
        "Create artwork inspired by your favorite song",
    ],
    3: [
        "Record and edit a podcast episode",
        "Write a short story about time travel",
        "Create a fictional world with its own rules",
        "Design a new product that solves a daily problem",
    ],
}

WEEKLY_POINTS_MIN = 1
WEEKLY_POINTS_MAX = 15
WEEKLY_POINTS_DEFAULT = 10

DEFAULT_USERNAME = "Creative User"

# -----------------------------
# Storage
# -----------------------------

USER_KEY = "user_data"
COMPETITORS_KEY = "competitors_data"
DAILY_PROMPTS_KEY = "daily_prompts_data"
WEEKLY_TASK_KEY = "weekly_task_data"
INSTALL_DATE_KEY = "install_date"

ALL_KEYS = [USER_KEY, COMPETITORS_KEY, DAILY_PROMPTS_KEY, WEEKLY_TASK_KEY, INSTALL_DATE_KEY]

SAVE_DIR = os.environ.get("CREATIVITY_LEAGUE_SAVE_DIR", os.path.join(".", "save"))
ATTACHMENT_DIR = os.path.join(SAVE_DIR, "attachments")
