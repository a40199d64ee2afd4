# image_derivatives/services/logger/constants.py
"""
Logger Service Constants
"""

# Console sink format (loguru markup)
CONSOLE_LOG_FORMAT = (
    "<dim>[{time:YYYY-MM-DD HH:mm:ss}]</dim> "
    "<level>[{level: ^8}]</level> "
    "<dim>({extra[source]: ^8} [{extra[logger_name]: ^9}])</dim> "
    "{message}"
)

# File sink format (plain text)
FILE_LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{extra[source]} | {extra[logger_name]} | {message}"
)

# Values bound to every record so formats never miss a key
DEFAULT_EXTRA = {"source": "system", "logger_name": "system", "context": {}}

# Context preview limits
CONSOLE_MAX_CONTEXT_ITEMS = 5
CONTEXT_VALUE_MAX_LENGTH = 120
