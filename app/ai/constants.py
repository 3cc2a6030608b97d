# app/ai/constants.py

# Tomorrow and its common misspellings
TOMORROW_PATTERN = r"\b(?:tomorrow|tomor+ow|tomm?or?ow|tmrw)\b"
TODAY_PATTERN = r"\btoday\b"
ISO_DATE_PATTERN = r"\b(\d{4})-(\d{2})-(\d{2})\b"

WEATHER_PATTERN = r"\b(?:weather|forecast|temperature|rain(?:ing|y)?|snow(?:ing|y)?|sunny|humid(?:ity)?|windy)\b"
TASK_INTENT_PATTERN = r"\b(?:task|tasks|todo|list|add|remove|delete|complete|schedule)\b"
LOCATION_PATTERN = r"\b(?:in|at|of|for)\s+[A-Za-z]"

# Longest phrases first so "to do" goes before "todo"
TITLE_FILLER_PATTERN = (
    r"\b(?:please|can you|could you|add|task|to do|todo|tomorrow|tomor+ow|tomm?or?ow|tmrw|today)\b"
)
NOTES_PATTERN = r"\bnotes?\s*:\s*(.+)$"

SKIP_TOKENS = {"skip", "no"}

DEFAULT_FREE_MINUTES = 45
DEFAULT_TOOL_ID = "openai"

TOOL_CATALOG = [
    {"id": "openai", "name": "OpenAI"},
    {"id": "anthropic", "name": "Anthropic"},
    {"id": "google", "name": "Google Gemini"},
    {"id": "mistral", "name": "Mistral"},
    {"id": "cohere", "name": "Cohere"},
]
