import logging
from datetime import datetime, timedelta, timezone

import pytest

from socials.keywords import normalize_keyword
from socials.utils import configure_logging, extract_domain_from_url, format_age, normalize_text

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "delta, expected",
    [
        (timedelta(seconds=5), "less than a minute ago"),
        (timedelta(minutes=1), "1 minute ago"),
        (timedelta(minutes=42), "42 minutes ago"),
        (timedelta(hours=3, minutes=10), "3 hours ago"),
        (timedelta(days=1, hours=2), "1 day ago"),
        (timedelta(days=9), "9 days ago"),
    ],
)
def test_format_age(delta, expected):
    assert format_age(NOW - delta, now=NOW) == expected


def test_format_age_unknown_and_future():
    assert format_age(None, now=NOW) == "N/A"
    assert format_age(NOW + timedelta(hours=1), now=NOW) == "less than a minute ago"


def test_normalize_helpers():
    assert normalize_text("  a \n\t b  ") == "a b"
    assert normalize_text(None) == ""
    assert normalize_keyword("  rust  ") == "rust"


def test_extract_domain_from_url():
    assert extract_domain_from_url("https://blog.example.co.uk/post") == "example.co.uk"
    assert extract_domain_from_url(None) == ""


@pytest.fixture
def clean_logger():
    logger = logging.getLogger("socials")
    saved = list(logger.handlers)
    yield logger
    for handler in list(logger.handlers):
        if handler not in saved:
            logger.removeHandler(handler)
            handler.close()
    logger.propagate = True


def test_configure_logging_is_idempotent(clean_logger, tmp_path):
    log_file = tmp_path / "logs" / "socials.log"
    configure_logging("debug", str(log_file))
    configure_logging("debug", str(log_file))

    ours = [h for h in clean_logger.handlers if getattr(h, "_socials_handler", False)]
    assert len(ours) == 1
    assert clean_logger.level == logging.DEBUG

    logging.getLogger("socials.test").debug("hello file")
    ours[0].flush()
    assert "hello file" in log_file.read_text()
