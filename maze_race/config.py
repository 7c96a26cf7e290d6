# Difficulty presets: (width, height, complexity)
DIFFICULTY_SETTINGS = {
    "easy": {"width": 9, "height": 9, "complexity": 0.3},
    "medium": {"width": 15, "height": 15, "complexity": 0.5},
    "hard": {"width": 21, "height": 21, "complexity": 0.8},
}
DEFAULT_DIFFICULTY = "medium"

# Generation
MIN_MAZE_SIZE = 3
EXTRA_PASSAGE_FACTOR = 0.1  # extra loops = w * h * (1 - complexity) * factor

# Pathfinding
PATH_ITERATION_FACTOR = 2  # expansion budget = factor * w * h

# AI move cadence (seconds between moves), harder => faster
MOVE_CADENCE = {
    "easy": 0.5,
    "medium": 0.3,
    "hard": 0.2,
}

# AI polling interval for the background ticker (seconds)
AI_TICK_INTERVAL = 0.05

# Flavor messages
TAUNTS = [
    "I'm on my way!",
    "Catch me if you can!",
    "Almost there!",
    "This is too easy!",
    "Try to keep up!",
    "I see the exit!",
]
TAUNT_COOLDOWN = 10.0
TAUNT_CHANCE = 0.3
TAUNT_DISPLAY_TIME = 3.0

# Logging
LOG_LEVEL_ENV = "MAZE_RACE_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)-20s - %(levelname)-8s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Window / timing
FPS = 60
WINDOW_TITLE = "Maze Race"

# Grid
TILE = 28
WALL_WIDTH = 3
HUD_HEIGHT = 64
MARGIN = 12

# Colors (RGB)
COLOR_BG = (15, 12, 30)
COLOR_WALL = (160, 140, 255)
COLOR_START = (60, 200, 120)
COLOR_END = (240, 80, 90)
COLOR_HUMAN = (255, 220, 0)
COLOR_AI = (255, 90, 160)
COLOR_AI_PATH = (120, 60, 90)
COLOR_TEXT = (220, 220, 220)
COLOR_HUD_BG = (25, 20, 45)

# Render sizes
AGENT_RADIUS = 9
PATH_DOT_RADIUS = 3
