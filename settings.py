# settings.py

# Host loop
FPS = 60
TITLE = "Floorwarden"

# Baseline scaling (percent per completed floor)
ENEMY_HEALTH_INCREASE_PER_FLOOR = 10.0
ENEMY_DAMAGE_INCREASE_PER_FLOOR = 10.0
ENEMY_COUNT_INCREASE_PER_FLOOR = 30.0

# Random floor modifiers
MAX_MODIFIERS_PER_FLOOR = 3

# Encounter completion
SETTLE_DELAY = 1.0  # seconds between "all clear" and the Won outcome

# Campaign
BOSS_FLOOR = 10

# Player defaults
PLAYER_MAX_HEALTH = 100.0
PLAYER_BASE_SPEED = 5.0
PLAYER_DAMAGE_PER_SECOND = 25.0

# Enemy defaults
ENEMY_MAX_HEALTH = 100.0
ENEMY_BASE_SPEED = 3.5
ENEMY_CONTACT_DAMAGE = 2.0
