import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Upper bound on requested rounds accepted by the API. The search is
# combinatorial; this caps schedule depth, not worst-case search time.
MAX_ROUNDS = int(os.getenv("MAX_ROUNDS", "50"))

CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    CORS_ORIGINS.extend(o.strip() for o in _extra.split(",") if o.strip())
