"""Tests for structlog configuration."""

import json
import logging
from decimal import Decimal

import pytest
import structlog

from shopdesk.config import Settings, configure_logging, sale_context
from shopdesk.config.logging import HANDLER_NAME, money_as_text


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def _json_lines(out: str) -> list[dict]:
    return [json.loads(line) for line in out.splitlines() if line.startswith("{")]


def test_sale_context_binds_and_unbinds():
    with sale_context("sale-1", attempt=2):
        bound = structlog.contextvars.get_contextvars()
        assert bound["sale_id"] == "sale-1"
        assert bound["attempt"] == 2
    assert "sale_id" not in structlog.contextvars.get_contextvars()


def test_money_as_text():
    event = money_as_text(None, "info", {"event": "x", "total": Decimal("300.00"), "lines": 2})
    assert event == {"event": "x", "total": "300.00", "lines": 2}


def test_json_output_carries_context(restore_logging, capsys: pytest.CaptureFixture[str]):
    configure_logging(Settings(environment="production", log_level="INFO"))
    logger = structlog.get_logger("shopdesk.tests")

    with sale_context("sale-9"):
        logger.info("sale_recorded", final_total=Decimal("275.00"))
        logging.getLogger("uvicorn.error").warning("stdlib line")

    records = _json_lines(capsys.readouterr().out)
    recorded = next(r for r in records if r["event"] == "sale_recorded")
    assert recorded["sale_id"] == "sale-9"
    assert recorded["final_total"] == "275.00"
    assert recorded["app"] == "ShopDesk"
    assert recorded["environment"] == "production"
    assert recorded["level"] == "info"

    stdlib = next(r for r in records if r["event"] == "stdlib line")
    assert stdlib["sale_id"] == "sale-9"
    assert stdlib["logger"] == "uvicorn.error"


def test_reconfigure_keeps_one_handler(restore_logging):
    configure_logging(Settings(environment="production"))
    configure_logging(Settings(environment="production"))

    ours = [h for h in logging.getLogger().handlers if h.get_name() == HANDLER_NAME]
    assert len(ours) == 1
    assert logging.getLogger("httpx").level == logging.WARNING
