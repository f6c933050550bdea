__version__ = "0.3.0"
__author__ = "The atrium developers"
__copyright__ = "2024, The atrium developers"
__description__ = (
    "Typed resources and lazy collections for a task-tracking REST API"
)
