import io

from models.enums import LogCategory, LogLevel
from utils.logger import configure_logger, get_category_logger, get_logger


def capture(level=LogLevel.DEBUG):
    stream = io.StringIO()
    configure_logger(level, use_colors=False, stream=stream)
    return stream


def test_singleton_survives_configuration():
    bound = get_category_logger(LogCategory.EXPORT)
    stream = capture()

    bound.info("Export started", frames=120)

    assert get_logger() is get_logger()
    assert "EXPORT" in stream.getvalue()


def test_structured_details():
    stream = capture()

    get_category_logger(LogCategory.PREVIEW).info("Preview started", fps=60, size="960x540")

    lines = stream.getvalue().splitlines()
    assert lines[0].endswith("Preview started")
    assert "PREVIEW" in lines[0]
    assert lines[1].strip() == "├─ fps: 60"
    assert lines[2].strip() == "└─ size: 960x540"


def test_min_level_filters():
    stream = capture(LogLevel.WARN)
    log = get_category_logger(LogCategory.SCENE)

    log.info("hidden")
    log.debug("hidden too")
    log.warn("shown")

    output = stream.getvalue()
    assert "hidden" not in output
    assert "shown" in output


def test_category_override():
    stream = capture()
    get_category_logger(LogCategory.SCENE).log("Moved", category=LogCategory.SYSTEM)
    assert "SYSTEM" in stream.getvalue()


def test_exc_info_appends_traceback():
    stream = capture()
    log = get_category_logger(LogCategory.SYSTEM)

    try:
        raise ValueError("bad value")
    except ValueError:
        log.error("Crashed", exc_info=True)

    output = stream.getvalue()
    assert "Crashed" in output
    assert "ValueError: bad value" in output


def test_no_ansi_codes_without_colors():
    stream = capture()
    get_category_logger(LogCategory.EXPORT).error("Export failed")
    assert "\033[" not in stream.getvalue()
