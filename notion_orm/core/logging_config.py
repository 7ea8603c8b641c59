import logging
import sys


class ContextFormatter(logging.Formatter):
    """Formatter that tolerates records without a ``model`` context field."""
    def format(self, record):
        if not hasattr(record, "model"):
            record.model = "-"
        return super().format(record)


def configure_logging(debug: bool = False) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ContextFormatter(
        "%(asctime)s %(levelname)s %(name)s [model=%(model)s] - %(message)s"
    ))
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        handlers=[handler],
        force=True,
    )
