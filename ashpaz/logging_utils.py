import logging


class NoiseFilter(logging.Filter):
    """Suppress chatty log lines coming from HTTP client libraries."""

    def __init__(self, patterns_to_suppress):
        super().__init__()
        self.patterns = patterns_to_suppress

    def filter(self, record):
        message = record.getMessage()
        return not any(p in message for p in self.patterns)


def setup_logging(level: str = "INFO"):
    """Configures logging for the application."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        handlers=[logging.StreamHandler()],
        force=True,
    )

    noise_filter = NoiseFilter(["HTTP Request:", "Retrying request to"])
    for handler in logging.getLogger().handlers:
        handler.addFilter(noise_filter)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
