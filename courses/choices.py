STATUS_CHOICES = [
    ("draft", "Draft"),
    ("published", "Published"),
    ("archived", "Archived"),
]

CONTENT_TYPE_CHOICES = [
    ("video", "Video"),
    ("pdf", "PDF"),
    ("text", "Text"),
    ("quiz", "Quiz"),
    ("assignment", "Assignment"),
]

QUESTION_TYPE_CHOICES = [
    ("multiple_choice", "Multiple Choice"),
    ("short_answer", "Short Answer"),
]
