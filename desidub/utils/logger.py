import sys
import logging
from loguru import logger


# ===========================
# Log Contexts
# ===========================
CONTEXTS = {
    "SERVER": {"color": "green", "icon": "🚀"},
    "API": {"color": "cyan", "icon": "🔗"},
    "SCRAPER": {"color": "blue", "icon": "🌐"},
    "HTTP": {"color": "magenta", "icon": "📡"},
    "CACHE": {"color": "white", "icon": "💾"},
}

LEVEL_ICONS = {
    "DEBUG": "🔍",
    "INFO": "ℹ️ ",
    "WARNING": "⚠️ ",
    "ERROR": "❌",
}


# ===========================
# Log Formatter
# ===========================
def format_log(record):
    context = CONTEXTS[record["extra"]["context"]]
    level_icon = LEVEL_ICONS.get(record["level"].name, "")

    return (
        "<white>{time:YYYY-MM-DD HH:mm:ss}</white> | "
        f"<level>{level_icon} {{level: <8}}</level> | "
        f"<{context['color']}>{context['icon']} {{extra[context]: <8}}</{context['color']}> | "
        "<level>{message}</level>\n"
    )


# ===========================
# Setup
# ===========================
def setup_logger(level: str):
    logger.remove()
    logger.add(sys.stderr, level=level, format=format_log, colorize=True)


def get_logger(context: str):
    if context not in CONTEXTS:
        raise ValueError(f"Unknown log context: {context}")
    return logger.bind(context=context)


server_logger = get_logger("SERVER")
api_logger = get_logger("API")
scraper_logger = get_logger("SCRAPER")
http_logger = get_logger("HTTP")
cache_logger = get_logger("CACHE")

# uvicorn access lines are replaced by the request middleware
logging.getLogger("uvicorn.access").disabled = True
logging.getLogger("httpx").setLevel(logging.WARNING)
