import logging
import sys
import structlog

SERVICE = "employee-imports"

def _service_context(env: str):
    def _add(_logger, _method, event_dict):
        event_dict.setdefault("service", SERVICE)
        event_dict.setdefault("env", env)
        return event_dict
    return _add

def configure_logging(env: str = "dev") -> None:
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        _service_context(env),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if env == "prod":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=shared_processors + [renderer],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=logging.INFO)

    # uvicorn keeps its own handlers unless told otherwise; send its lines to stdout too
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uv = logging.getLogger(name)
        uv.handlers.clear()
        uv.propagate = True

logger = structlog.get_logger()
