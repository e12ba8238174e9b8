from tlearn.schemas.auth import (
    ApiKeyOutSchema,
    LoginOutSchema,
    LoginSchema,
    MeOutSchema,
    RegisterSchema,
    UserOutSchema,
)
from tlearn.schemas.content import (
    CompletionOutSchema,
    CourseCreateSchema,
    CourseOutSchema,
    LessonCreateSchema,
    LessonListItemSchema,
    LessonOutSchema,
    LessonTaskOutSchema,
    StepSchema,
    TaskCreateSchema,
    TaskOutSchema,
)

__all__ = [
    "ApiKeyOutSchema",
    "LoginOutSchema",
    "LoginSchema",
    "MeOutSchema",
    "RegisterSchema",
    "UserOutSchema",
    "CompletionOutSchema",
    "CourseCreateSchema",
    "CourseOutSchema",
    "LessonCreateSchema",
    "LessonListItemSchema",
    "LessonOutSchema",
    "LessonTaskOutSchema",
    "StepSchema",
    "TaskCreateSchema",
    "TaskOutSchema",
]
