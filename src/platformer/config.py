# --- Display ---
WIDTH = 960
HEIGHT = 540
FPS = 60

# --- Physics (per frame, tuned for smooth touch) ---
GRAV = 0.66
FRICTION = 0.86             # horizontal damping, only while grounded
MOVE = 0.72                 # horizontal acceleration per frame of input
JUMP = 12.2                 # upward impulse
MAXVX = 5.4
MAXVY = 18.5
EPS = 8                     # landing / head-bump tolerance (px)

SAFETY_LINE = HEIGHT - 36   # nobody falls below this line

# --- Player ---
PLAYER_W = 40
PLAYER_H = 52
SPAWN_X = 80
SPAWN_Y = HEIGHT - 260

# --- Entities ---
FAKE_BOUNCE = 7.4           # vy given to the player when a fake platform vanishes
FALL_SPEED = 3.4            # vy of a fall-away platform once touched
DOOR_W = 38
DOOR_H = 56
CHECKPOINT_R = 16
CHECKPOINT_MARGIN = 6       # extra radius when testing activation
CHECKPOINT_SPAWN_DX = 20
CHECKPOINT_SPAWN_DY = 6
SPAWN_PAD_W = 70
SPAWN_PAD_H = 10

# --- Level generation ---
TOTAL_LEVELS = 320
SEED_BASE = 1000
SEED_LEVEL_STRIDE = 7
SEED_HARD_OFFSET = 9999
FLOOR_MARGIN = 400          # floor extends past the level width by this much

# --- Cosmetics ---
BLINK_PERIOD = 110
BLINK_FRAMES = 6

# --- Colors (RGB) ---
COLOR_BG = (10, 13, 30)
COLOR_FG = (220, 232, 255)
COLOR_SOLID = (110, 162, 255)
COLOR_FAKE = (255, 209, 102)
COLOR_MOVE = (179, 140, 255)
COLOR_SPIKE = (255, 59, 107)
COLOR_DOOR = (139, 255, 192)
COLOR_DOOR_OPEN = (102, 255, 153)
COLOR_DOOR_FAKE = (255, 53, 94)
COLOR_SAW = (255, 159, 28)
COLOR_SAW_TEETH = (255, 210, 127)
COLOR_WALL = (255, 88, 88)
COLOR_CHECKPOINT = (255, 29, 94)
COLOR_CHECKPOINT_ON = (107, 255, 149)
COLOR_GRASS = (0, 255, 140)
COLOR_PLAYER = (211, 47, 47)
COLOR_PLAYER_LEGS = (25, 118, 210)
COLOR_EYES = (255, 255, 255)
HIDDEN_SPIKE_ALPHA = 18     # ~7% opacity
