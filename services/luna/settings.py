# -------------------------------
# Display setup
# -------------------------------
WIDTH, HEIGHT = 128, 64
I2C_ADDR = 0x3C
FONT_PATH = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"
FONT_SIZE = 8

# -------------------------------
# Layout
# -------------------------------
MAX_CHARS_PER_LINE = 25
STATUS_Y = 0
IP_Y = 10
MESSAGE_Y = 20
LINE_SPACING = 8
MAX_MESSAGE_Y = 60
SCROLL_STEP = 6

# -------------------------------
# Ollama
# -------------------------------
OLLAMA_URL = "http://localhost:11434/api/generate"
OLLAMA_MODEL = "llama3.1:8b-instruct-q4_K_M"
OLLAMA_TEMPERATURE = 0.9
OLLAMA_MAX_TOKENS = 50
OLLAMA_TIMEOUT = 30  # seconds

# -------------------------------
# Timing
# -------------------------------
REFRESH_INTERVAL = 1.0          # seconds between frames
MESSAGE_UPDATE_INTERVAL = 300   # seconds between LUNA messages
CATEGORY_MINUTES = 15           # prompt type rotates every 15 minutes

INITIAL_MESSAGE = "Initializing..."
