from rest_framework import status


class CourseServiceError(Exception):
    """Base error raised by course services; views turn it into a response."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request could not be completed."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class QuizNotFound(CourseServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Quiz not found."


class AttemptNotFound(CourseServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Quiz attempt not found."


class AttemptLimitExceeded(CourseServiceError):
    default_message = "No attempts remaining."

    def __init__(self, max_attempts=None, message=None):
        self.max_attempts = max_attempts
        if message is None and max_attempts is not None:
            message = f"No attempts remaining. Maximum attempts ({max_attempts}) reached for this quiz."
        super().__init__(message)


class AlreadySubmitted(CourseServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "This attempt has already been submitted."


class AttemptDeadlinePassed(CourseServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "The time limit for this attempt has passed."


class InvalidQuestion(CourseServiceError):
    default_message = "Invalid quiz question."


class InvalidQuiz(CourseServiceError):
    default_message = "Invalid quiz settings."


class NotEnrolled(CourseServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not enrolled in this course."


class ContentNotFound(CourseServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Content not found."


class ContentLocked(CourseServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "This content is locked."


class InvalidSchedule(CourseServiceError):
    default_message = "Invalid content schedule."


class ScheduleNotFound(CourseServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Content schedule not found."


class NotCourseInstructor(CourseServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized"
