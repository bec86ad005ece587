import json
import logging
import os
import tempfile

from annotator_core.config import Config
from annotator_core.geometry import Shape
from annotator_core.logging import get_structured_logger, log_warning
from annotator_core.logging.logger import JSONAwareFormatter


def test_window_shape(monkeypatch):
    monkeypatch.setattr(Config, "WINDOW_WIDTH", 640)
    monkeypatch.setattr(Config, "WINDOW_HEIGHT", 480)
    assert Config.get_window_shape() == Shape(w=640, h=480)


def test_export_folder(monkeypatch):
    monkeypatch.setattr(Config, "EXPORT_FOLDER", None)
    assert Config.get_export_folder() == os.path.join(tempfile.gettempdir(), Config.SERVICE_NAME)
    monkeypatch.setattr(Config, "EXPORT_FOLDER", "/exports")
    assert Config.get_export_folder() == "/exports"


def test_structured_logger(caplog):
    caplog.set_level(logging.INFO)
    logger = get_structured_logger("annotator_core.test")
    logger.info("added box", file_path="im.png", tool="Bbox")
    entry = json.loads(caplog.records[-1].getMessage())
    assert entry == {"message": "[Bbox] added box", "file_path": "im.png", "tool": "Bbox"}
    logger.info("plain")
    assert caplog.records[-1].getMessage() == "plain"


def test_log_helpers_use_caller_module(caplog):
    caplog.set_level(logging.INFO)
    log_warning("careful")
    assert caplog.records[-1].name == __name__
    assert caplog.records[-1].levelno == logging.WARNING


def test_json_aware_formatter():
    formatter = JSONAwareFormatter(fmt="%(levelname)s - %(message)s")
    record = logging.LogRecord(
        "annotator_core", logging.INFO, __file__, 1, json.dumps({"message": "m", "tool": "Zoom"}), None, None
    )
    entry = json.loads(formatter.format(record))
    assert entry["severity"] == "INFO"
    assert entry["message"] == "m"
    assert entry["tool"] == "Zoom"
    plain = logging.LogRecord("annotator_core", logging.INFO, __file__, 1, "hello", None, None)
    assert formatter.format(plain) == "INFO - hello"
