"""
Logging configuration, applied by entrypoints via `logging.config.dictConfig`
"""

logging_config = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
        },
    },
    "handlers": {
        "default": {
            "level": "DEBUG",
            "formatter": "standard",
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "loadbalancer": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "loadbalancer.low.tracing": {
            "level": "WARNING",
        },
    },
}
