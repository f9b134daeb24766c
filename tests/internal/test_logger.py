import logging
import time

import mock
import pytest

import ddexport._logger
import ddexport.internal.logger
from ddexport.internal.logger import DDFormatter
from ddexport.internal.logger import LoggingBucket
from ddexport.internal.logger import get_logger
from ddexport.internal.logger import log_filter
from tests.utils import override_env


ALL_LEVEL_NAMES = ("debug", "info", "warning", "error", "exception", "critical", "fatal")


class TestLogger(object):
    def setup_method(self):
        # Reset to default values
        ddexport.internal.logger._buckets.clear()
        ddexport.internal.logger._rate_limit = 60

    def teardown_method(self):
        logging.getLogger("test.logger").setLevel(logging.NOTSET)
        ddexport.internal.logger._buckets.clear()
        ddexport.internal.logger._rate_limit = 60

    def _make_record(self, logger, msg="test", args=(), level=logging.INFO, fn="module.py", lno=5):
        return logger.makeRecord(logger.name, level, fn, lno, msg, args, None)

    def test_get_logger(self):
        """
        When using `get_logger` to get a logger
            We return a logging.Logger with the rate limit filter attached once
        """
        log = get_logger("test.logger")
        assert isinstance(log, logging.Logger)
        assert log.name == "test.logger"
        assert log is get_logger("test.logger")
        assert log.filters.count(log_filter) == 1

    @mock.patch("logging.Logger.callHandlers")
    def test_logger_handle_no_limit(self, call_handlers):
        """
        Calling `logging.Logger.handle`
            When no rate limit is set
                Always calls the base `Logger.handle`
        """
        log = get_logger("test.logger")
        log.setLevel(logging.INFO)
        ddexport.internal.logger._rate_limit = 0

        for _ in range(1000):
            log.info("test")

        assert call_handlers.call_count == 1000
        assert ddexport.internal.logger._buckets == dict()

    @mock.patch("logging.Logger.callHandlers")
    def test_logger_handle_debug(self, call_handlers):
        """
        Calling `logging.Logger.handle`
            When effective level is DEBUG
                Always calls the base `Logger.handle`
        """
        log = get_logger("test.logger")
        log.setLevel(logging.DEBUG)

        for level in ALL_LEVEL_NAMES:
            log_fn = getattr(log, level)
            for _ in range(100):
                log_fn("test")

        assert call_handlers.call_count == 100 * len(ALL_LEVEL_NAMES)
        assert ddexport.internal.logger._buckets == dict()

    @mock.patch("logging.Logger.callHandlers")
    def test_logger_handle_bucket_limited(self, call_handlers):
        """
        When calling `logging.Logger.handle`
            With multiple records from the same call site in a single time frame
                We pass only the first to the base `Logger.handle`
                We keep track of the number skipped
        """
        log = get_logger("test.logger")
        log.setLevel(logging.INFO)

        first_record = self._make_record(log, msg="first")
        first_time = time.monotonic()
        log.handle(first_record)
        second_time = time.monotonic()

        for _ in range(100):
            log.handle(self._make_record(log))

        call_handlers.assert_called_once_with(first_record)

        logging_bucket = ddexport.internal.logger._buckets.get((first_record.pathname, first_record.lineno))
        assert isinstance(logging_bucket, LoggingBucket)
        assert first_time <= logging_bucket.bucket <= second_time
        assert logging_bucket.skipped == 100

    @mock.patch("logging.Logger.callHandlers")
    def test_logger_handle_bucket_key(self, call_handlers):
        """
        When calling `logging.Logger.handle`
            With records from different call sites
                We use different buckets to limit them
        """
        log = get_logger("test.logger")
        log.setLevel(logging.INFO)

        log.handle(self._make_record(log, lno=1))
        log.handle(self._make_record(log, lno=2))
        log.handle(self._make_record(log, fn="other.py", lno=1))

        assert call_handlers.call_count == 3
        assert len(ddexport.internal.logger._buckets) == 3

    def test_logger_bucket_skipped_count(self):
        """
        When a bucket from a previous time frame exists
            The next record carries the number of skipped records
        """
        log = get_logger("test.logger")
        record = self._make_record(log, msg="hello %s", args=(1,))
        bucket = LoggingBucket(bucket=time.monotonic() - 60, skipped=20)

        assert bucket.is_sampled(record, 60)
        assert record.skipped == 20
        assert bucket.skipped == 0
        assert DDFormatter().format(record) == "INFO hello 1 [20 skipped]"


def test_formatter_without_skipped():
    record = logging.getLogger("test.formatter").makeRecord(
        "test.formatter", logging.WARNING, "module.py", 1, "status %d", (500,), None
    )
    assert DDFormatter().format(record) == "WARNING status 500"


@pytest.fixture
def ddexport_logger():
    logger = logging.getLogger("ddexport")
    handlers, level = list(logger.handlers), logger.level
    logger.handlers = []
    try:
        yield logger
    finally:
        for handler in logger.handlers:
            handler.close()
        logger.handlers = handlers
        logger.setLevel(level)


def test_logger_adds_stream_handler_by_default(ddexport_logger):
    with override_env({}, replace_os_env=True):
        ddexport._logger.configure_ddexport_logger()

    assert len(ddexport_logger.handlers) == 1
    assert isinstance(ddexport_logger.handlers[0], logging.StreamHandler)
    assert isinstance(ddexport_logger.handlers[0].formatter, DDFormatter)


def test_logger_no_stream_handler(ddexport_logger):
    with override_env(dict(DD_TRACE_LOG_STREAM_HANDLER="false"), replace_os_env=True):
        ddexport._logger.configure_ddexport_logger()

    assert ddexport_logger.handlers == []


def test_logger_debug(ddexport_logger):
    with override_env(dict(DD_TRACE_DEBUG="true", DD_TRACE_LOG_STREAM_HANDLER="false"), replace_os_env=True):
        ddexport._logger.configure_ddexport_logger()

    assert ddexport_logger.level == logging.DEBUG
    assert get_logger("ddexport.api").getEffectiveLevel() == logging.DEBUG


def test_logger_file(ddexport_logger, tmp_path):
    log_file = tmp_path / "ddexport.log"
    env = dict(DD_TRACE_LOG_FILE=str(log_file), DD_TRACE_LOG_FILE_LEVEL="warning", DD_TRACE_LOG_STREAM_HANDLER="false")
    with override_env(env, replace_os_env=True):
        ddexport._logger.configure_ddexport_logger()

    (handler,) = ddexport_logger.handlers
    assert handler.level == logging.WARNING
    assert handler.baseFilename == str(log_file)

    logging.getLogger("ddexport.test").warning("could not send %d traces", 3)
    handler.flush()
    assert "could not send 3 traces" in log_file.read_text()


def test_logger_file_invalid_level(ddexport_logger):
    env = dict(DD_TRACE_LOG_FILE_LEVEL="LOUD", DD_TRACE_LOG_STREAM_HANDLER="false")
    with override_env(env, replace_os_env=True):
        with pytest.raises(ValueError):
            ddexport._logger.configure_ddexport_logger()
