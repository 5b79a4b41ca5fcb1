import logging

logger = logging.getLogger()


def setup_logger(is_verbose):
    """Configures the logger based on the `is_verbose` flag."""
    level = logging.DEBUG if is_verbose else logging.INFO
    logging.basicConfig(level=level, format='%(asctime)s - %(levelname)s - %(message)s')

    logging.getLogger("tensorflow").setLevel(level)


class TqdmLogger:
    def __init__(self, logger):
        self.logger = logger

    def write(self, msg):
        # Drop the empty lines tqdm writes
        if msg.strip():
            self.logger.info(msg.strip())

    def flush(self):
        pass  # called by tqdm, nothing buffered here


class TrainingLog:
    """
    Appends training summaries to a log file and echoes them to the logger.

    Writing the file is best-effort: a failing write is reported as a warning and never
    interrupts training.
    """

    def __init__(self, log_file):
        self.log_file = log_file

    def append(self, text):
        logger.info(text)
        try:
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(f"{text}\n")
        except OSError as e:
            logger.warning(f"Could not write to log file {self.log_file}: {e}")
