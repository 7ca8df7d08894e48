# --- Display ---
WIDTH = 800
HEIGHT = 400
FPS = 60

# --- Speed ---
INITIAL_SPEED = 3.0          # scroll speed at level 0 (px/tick)
MAX_SPEED_LEVEL = 20
MAX_SPEED = WIDTH / (0.25 * FPS)   # crosses the whole field in 0.25 s

# --- Player ---
PLAYER_X = 100               # player's fixed x (world scrolls left)
PLAYER_W = 30
PLAYER_H = 10
BASE_MOVE_SPEED = 4.0        # px/tick for the slowest movement tier
REPULSE_PUSH = 1.5           # boundary push-back, in player heights
REPULSE_NUDGE = 0.5          # rebound velocity, in base move speeds

# --- Particle tail ---
PARTICLE_MIN_SIZE = 1.0
PARTICLE_SIZE_SPREAD = 3.0   # size in [MIN, MIN + SPREAD)
PARTICLE_FADE = 0.02         # opacity lost per tick
PARTICLE_SHRINK = 0.98       # size factor per tick

# --- Obstacles ---
OBSTACLE_SPAWN_INTERVAL = 90     # ticks
OBSTACLE_MAX_COUNT = 4
OBSTACLE_PADDING = 30
OBSTACLE_MIN_H = 20.0
OBSTACLE_H_SPREAD = 80.0         # height in [20, 100)
OBSTACLE_MIN_W = 20.0
OBSTACLE_W_SPREAD = 40.0         # width in [20, 60)

# --- Score ---
SCORE_TICKS_PER_SECOND = 60      # accumulator gains level**2 / 60 per tick

# --- Colors (RGB) ---
COLOR_BG = (8, 10, 20)
COLOR_FG = (220, 232, 255)
COLOR_PLAYER = (0, 255, 255)
COLOR_OBSTACLE = (255, 51, 51)
COLOR_MESSAGE_BG = (30, 20, 40)

# --- Debug ---
DEBUG_OVERLAY = False            # entity counts + game speed in the corner
