from .course_views import *
from .quiz_views import *
from .progress_views import *
from .content_views import *
