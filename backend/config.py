# config.py
# env-driven settings and planning policy constants

import os
from dotenv import load_dotenv

load_dotenv()

# geocoding providers
MAPBOX_ACCESS_TOKEN = os.getenv("MAPBOX_ACCESS_TOKEN", "")
MAPBOX_BASE_URL = os.getenv("MAPBOX_BASE_URL", "https://api.mapbox.com/search/searchbox/v1")
NOMINATIM_URL = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org/search")
NOMINATIM_USER_AGENT = os.getenv("NOMINATIM_USER_AGENT", "MiddleMeetup/1.0 (contact@middlemeetup.com)")

# venue recommendations
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

# timeouts (seconds)
GEOCODE_TIMEOUT_S = int(os.getenv("GEOCODE_TIMEOUT_S", "10"))
PROVIDER_TIMEOUT_S = int(os.getenv("PROVIDER_TIMEOUT_S", "10"))

AUTOCOMPLETE_DEBOUNCE_MS = int(os.getenv("AUTOCOMPLETE_DEBOUNCE_MS", "300"))

# itinerary policy (minutes, km/h). straight-line travel, no routing
AVERAGE_SPEED_KMH = float(os.getenv("AVERAGE_SPEED_KMH", "50"))
DEPARTURE_BUFFER_MIN = int(os.getenv("DEPARTURE_BUFFER_MIN", "30"))
MEETING_BUFFER_MIN = int(os.getenv("MEETING_BUFFER_MIN", "15"))
TRANSITION_BUFFER_MIN = int(os.getenv("TRANSITION_BUFFER_MIN", "30"))
WRAP_UP_MIN = int(os.getenv("WRAP_UP_MIN", "15"))
DEFAULT_EXPERIENCE_MIN = int(os.getenv("DEFAULT_EXPERIENCE_MIN", "120"))

# per process cache
CACHE_TTL_S = int(os.getenv("CACHE_TTL_S", "600"))

# CORS origins
FRONTEND_LOCAL = "http://localhost:3000"
FRONTEND_PROD = os.getenv("FRONTEND_PROD", "")
