"""Configuration for judge evaluations and the HTTP API."""

import os

# Text limits for judge feedback (characters, surrounding whitespace ignored)
JUDGING_CONFIG = {
    "criterion_feedback_max": 1000,
    "overall_feedback_min": 10,
    "overall_feedback_max": 2000,
}

# Frontend origins allowed by CORS; comma separated override
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("HACKATHON_CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if o.strip()
]

LOG_LEVEL = os.getenv("HACKATHON_LOG_LEVEL", "INFO").upper()
