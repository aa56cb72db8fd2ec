import sys
from typing import Iterable
from tqdm import tqdm
from loguru import logger

LOGGER_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")
LOGGER_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)

tqdm.pandas()


class LogConfig:
    """Reporting of the compute and aggregation stages.

    Stage steps are logged with loguru, long loops over features, targets and
    isochrone batches show tqdm progress bars. Numeric behaviour of the stages
    is configured separately in :data:`indicatorsnet.config.engine_config`.

    Parameters
    ----------
    logger_level : str, default="INFO"
        Level of the stderr sink, one of :data:`LOGGER_LEVELS`.
    disable_tqdm : bool, default=False
        Hide progress bars, including ``progress_apply`` of per feature
        calculations.
    """

    def __init__(self, logger_level: str = "INFO", disable_tqdm: bool = False):
        self.logger_level = logger_level
        self.disable_tqdm = disable_tqdm
        self._handler_id: int | None = None

    def set_logger_level(self, level: str):
        """Replace the stderr sink with one of the given level.

        The first call removes loguru's default sink, later calls only replace
        the sink added here. Levels are case insensitive.

        Raises
        ------
        ValueError
            If *level* is not one of :data:`LOGGER_LEVELS`.
        """

        level = level.upper()
        if level not in LOGGER_LEVELS:
            raise ValueError(f"Logger level should be one of {LOGGER_LEVELS}")
        if self._handler_id is None:
            logger.remove()
        else:
            logger.remove(self._handler_id)
        self._handler_id = logger.add(sys.stderr, level=level, format=LOGGER_FORMAT)
        self.logger_level = level

    def set_disable_tqdm(self, disable: bool):
        self.disable_tqdm = disable

    def progress(self, iterable: Iterable, desc: str | None = None, total: int | None = None) -> Iterable:
        """Wrap *iterable* into a progress bar unless progress bars are disabled."""
        return tqdm(iterable, desc=desc, total=total, disable=self.disable_tqdm)


log_config = LogConfig()
