"""
Centralized logging configuration for the SigTrade trading core.

Everything logs through structlog. Risk gate decisions and trade lifecycle
transitions go through audit loggers bound to a subsystem, so every
placement and settlement can be reconstructed from the log stream alone.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger

from ..ledger.models import Trade, TradeState
from ..models.trading import TradeRequest

GATING_SUBSYSTEM = "gating"
LEDGER_SUBSYSTEM = "ledger"


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True
) -> None:
    """
    Configure structlog on top of the standard library root logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: Render JSON lines instead of the colored console format
        include_timestamp: Add an ISO timestamp to every entry
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        stream=sys.stdout,
        format="%(message)s"
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
    processors.append(
        structlog.processors.JSONRenderer() if format_json
        else structlog.dev.ConsoleRenderer(colors=True)
    )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_audit_logger(name: str, subsystem: str) -> FilteringBoundLogger:
    """
    Get a logger whose entries belong to the trade audit trail.

    Args:
        name: Logger name (typically __name__)
        subsystem: GATING_SUBSYSTEM or LEDGER_SUBSYSTEM
    """
    return structlog.get_logger(name).bind(subsystem=subsystem, audit_trail=True)


def log_gate_decision(
    logger: FilteringBoundLogger,
    request: TradeRequest,
    gate_name: str,
    passed: bool,
    reason: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Record one risk check for a proposed trade.

    Passing checks are debug noise; a failing check is the denial reason
    shown to the caller and is logged as a warning.
    """
    bound_logger = logger.bind(
        gate_name=gate_name,
        gate_result="PASS" if passed else "FAIL",
        request_id=request.request_id,
        source=request.source.value,
        amount=str(request.amount),
        reason=reason,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if passed:
        bound_logger.debug("Gate passed")
    else:
        bound_logger.warning("Gate failed")


def log_state_transition(
    logger: FilteringBoundLogger,
    trade: Trade,
    previous_state: Optional[TradeState],
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Record a trade entering its current state.

    Args:
        logger: Ledger audit logger
        trade: Trade after the transition
        previous_state: State before the transition, None for a new trade
        trigger: Ledger operation that caused it ("place" or "settle")
        context: Account figures or other data worth keeping with the entry
    """
    bound_logger = logger.bind(
        trade_id=trade.trade_id,
        pair=trade.pair,
        from_state=previous_state.value if previous_state is not None else "none",
        to_state=trade.state.value,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("State transition")
