# Quiz defaults applied when the stored value is null
DEFAULT_PASSING_SCORE = 70
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_QUESTION_POINTS = 1

MULTIPLE_CHOICE = "multiple_choice"
SHORT_ANSWER = "short_answer"

# Drip content labels
IMMEDIATE_ACCESS = "Immediate Access"
AVAILABLE_NOW = "Available now"
