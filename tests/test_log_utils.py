import logging

from AuthorMetrics.log_utils import (
    ColoredFormatter,
    CategoryAdapter,
    Logger,
    LogSource,
    LogCategory,
    STEP_LEVEL,
    SUCCESS_LEVEL,
)


def _record(msg, level=logging.INFO, **extra):
    record = logging.LogRecord("AuthorMetrics", level, __file__, 1, msg, None, None)
    for k, v in extra.items():
        setattr(record, k, v)
    return record


def test_custom_levels_registered():
    assert logging.getLevelName(STEP_LEVEL) == "STEP"
    assert logging.getLevelName(SUCCESS_LEVEL) == "SUCCESS"

def test_plain_formatter_adds_tags():
    """
    Without color the source and category appear as bracketed tags.
    """
    fmt = ColoredFormatter("%(levelname)s %(message)s", use_color=False)
    record = _record("GET https://api.openalex.org/authors/A1",
                     source=LogSource.OPENALEX, category=LogCategory.LOOKUP)

    assert fmt.format(record) == "INFO [OpenAlex] [LOOKUP] GET https://api.openalex.org/authors/A1"
    # the record itself is left untouched for other handlers
    assert record.msg == "GET https://api.openalex.org/authors/A1"

def test_colored_formatter_restores_level_name():
    fmt = ColoredFormatter("%(levelname)s %(message)s", use_color=True)
    record = _record("done", level=logging.WARNING, category=LogCategory.ERROR)

    out = fmt.format(record)

    assert "\033[" in out
    assert record.levelname == "WARNING"

def test_category_adapter_moves_keywords_to_extra():
    adapter = CategoryAdapter(logging.getLogger("AuthorMetrics.test"), {})
    msg, kwargs = adapter.process("hello", {"source": LogSource.CSV, "category": LogCategory.SAVE})

    assert msg == "hello"
    assert kwargs["extra"] == {"source": "CSV", "category": "SAVE"}

def test_logger_mirrors_to_file(tmp_path):
    log = Logger(name="AuthorMetrics.test_file")
    path = tmp_path / "nested" / "run.log"

    log.set_log_file(str(path))
    log.step("Run started", category=LogCategory.PLAN)
    log.success("Row saved", source=LogSource.CSV, category=LogCategory.SAVE)
    assert log.log_file_path == str(path)
    log.close()

    text = path.read_text(encoding="utf-8")
    assert "[STEP    ] [PLAN] Run started" in text
    assert "[SUCCESS ] [CSV] [SAVE] Row saved" in text
    assert "\033[" not in text
    assert log.log_file_path is None
