import logging

import pytest

from sr_pipeline.core import get_config
from sr_pipeline.core.exceptions import ConfigurationError
from sr_pipeline.core.logger import SRLogger
from sr_pipeline.processing import SRPipeline


@pytest.fixture
def broken_config(tmp_path, monkeypatch):
    (tmp_path / "settings.yaml").write_text("logging: [unclosed")
    (tmp_path / "models.yaml").write_text("models: {}\n")
    monkeypatch.setenv("SR_PIPELINE_CONFIG", str(tmp_path))
    return tmp_path


@pytest.fixture
def fresh_logger_name(request):
    name = f"sr-test-{request.node.name}"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


def test_model_context_in_records(caplog, fresh_logger_name):
    logger = SRLogger(fresh_logger_name, model="Resizer")

    with caplog.at_level(logging.INFO, logger=fresh_logger_name):
        logger.log_stage("Residual resize", "40x28 -> 30x21")

    record = caplog.records[-1]
    assert record.model == "Resizer"
    assert record.getMessage() == ">>> Stage: Residual resize - 40x28 -> 30x21"


def test_error_includes_exception_details(caplog, fresh_logger_name):
    logger = SRLogger(fresh_logger_name)

    with caplog.at_level(logging.ERROR, logger=fresh_logger_name):
        logger.error("resize failed", RuntimeError("out of memory"))

    message = caplog.records[-1].getMessage()
    assert "Exception Type: RuntimeError" in message
    assert "out of memory" in message


def test_broken_settings_fall_back_to_default_console(broken_config, caplog, fresh_logger_name):
    with caplog.at_level(logging.WARNING, logger=fresh_logger_name):
        logger = SRLogger(fresh_logger_name)

    assert len(logger.logger.handlers) == 1
    assert any("using defaults" in record.getMessage() for record in caplog.records)

    with pytest.raises(ConfigurationError):
        get_config()


def test_pipeline_builds_and_runs_with_broken_settings(broken_config, fake_model, make_image):
    pipeline = SRPipeline(fake_model, 4.0)

    assert pipeline.run_to_scale(make_image(10, 7), 3.0).size == (30, 21)
