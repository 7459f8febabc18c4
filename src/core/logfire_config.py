"""
Logfire Configuration Module

Centralized logfire configuration and instrumentation setup for hotel-api.

Usage:
    from src.core.logfire_config import initialize_logfire

    results = initialize_logfire(app, engine)  # idempotent; safe to call at startup
    # results: {"configured": bool, "instrumentation": {...}}
"""

import logging
from typing import Any, Dict, Optional

import logfire
from fastapi import FastAPI, Request
from sqlalchemy import Engine

from src.core.config import settings
from src.core.logger import setup_logfire_handler

_SENSITIVE_FIELDS = {"password", "token", "secret", "slip"}


class _LogfireState:
    """Internal state management for logfire configuration."""

    def __init__(self) -> None:
        self.configured = False
        self.instrumented_engines: set[int] = set()


_state = _LogfireState()


def custom_request_attributes_mapper(
    request: Request, attributes: Dict[str, Any]
) -> Optional[Dict[str, Any]]:
    """
    Trim what logfire records for each request.

    Record bodies can embed base64 images and password fields, so values are
    reduced to their keys with sensitive ones masked.

    Returns:
        dict or None: Customized attributes dict, or None to set span level to 'debug'
    """
    endpoint = str(request.url.path)
    request_id = request.headers.get("x-request-id")

    if attributes.get("errors"):
        return {
            "errors": attributes["errors"],
            "endpoint": endpoint,
            "method": request.method,
            "request_id": request_id,
        }

    filtered_values: Dict[str, Any] = {}
    for key, value in (attributes.get("values") or {}).items():
        if key.lower() in _SENSITIVE_FIELDS:
            filtered_values[key] = "[REDACTED]"
        elif isinstance(value, dict):
            filtered_values[key] = sorted(value)
        else:
            filtered_values[key] = value

    return {
        "values": filtered_values,
        "endpoint": endpoint,
        "method": request.method,
        "request_id": request_id,
    }


def setup_logfire() -> bool:
    """
    Set up basic logfire configuration.

    Returns:
        bool: True if logfire was successfully configured, False otherwise
    """
    logger = logging.getLogger("hotel_api.logfire")

    if not settings.logfire__enabled or _state.configured:
        return _state.configured

    try:
        config_kwargs: Dict[str, Any] = {
            "service_name": settings.logfire__service_name,
            "environment": settings.logfire__environment,
            "scrubbing": False if settings.logfire__disable_scrubbing else None,
        }
        if settings.logfire__token:
            config_kwargs["token"] = settings.logfire__token.get_secret_value()

        logfire.configure(**config_kwargs)
        logging.getLogger("hotel_api.startup").info(
            "Logfire initialized for service: %s", settings.logfire__service_name
        )

        setup_logfire_handler()

        _state.configured = True
        return True

    except Exception as e:
        logger.error("Failed to initialize logfire: %s", e)
        return False


def instrument_sqlalchemy(engine: Engine) -> bool:
    """Instrument one SQLAlchemy engine; each engine is instrumented once."""
    logger = logging.getLogger("hotel_api.logfire")

    if not settings.logfire__enabled or not settings.logfire__instrument__sqlalchemy:
        return False
    if id(engine) in _state.instrumented_engines:
        return True

    try:
        logfire.instrument_sqlalchemy(engine=engine)
        _state.instrumented_engines.add(id(engine))
        logger.info("SQLAlchemy engine instrumented with logfire")
        return True
    except Exception as e:
        logger.warning("Failed to instrument SQLAlchemy with logfire: %s", e)
        return False


def instrument_fastapi(app: FastAPI) -> bool:
    """
    Set up logfire instrumentation for FastAPI.

    Returns:
        bool: True if FastAPI was successfully instrumented, False otherwise
    """
    logger = logging.getLogger("hotel_api.logfire")

    if not settings.logfire__enabled or not settings.logfire__instrument__fastapi:
        return False

    try:
        logfire.instrument_fastapi(
            app,
            request_attributes_mapper=custom_request_attributes_mapper,
        )
        logger.info("FastAPI instrumented with logfire")
        return True

    except Exception as e:
        logger.error("Failed to instrument FastAPI with logfire: %s", e)
        return False


def initialize_logfire(
    app: Optional[FastAPI] = None, engine: Optional[Engine] = None
) -> Dict[str, Any]:
    """
    Complete logfire initialization including configuration and instrumentation.

    Args:
        app: Optional FastAPI application instance for instrumentation
        engine: Optional SQLAlchemy engine for instrumentation

    Returns:
        dict: Initialization results with status for each component
    """
    results: Dict[str, Any] = {
        "configured": setup_logfire(),
        "instrumentation": {"fastapi": False, "sqlalchemy": False},
    }

    if results["configured"]:
        if app is not None:
            results["instrumentation"]["fastapi"] = instrument_fastapi(app)
        if engine is not None:
            results["instrumentation"]["sqlalchemy"] = instrument_sqlalchemy(engine)

    return results
