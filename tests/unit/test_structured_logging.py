"""Tests for structured logging context."""

from uuid import uuid4

import pytest
import structlog

from src.vitelis.core.logging import (
    bind_execution_context,
    bind_request_context,
    bind_user_context,
    clear_request_context,
)

pytestmark = pytest.mark.unit


def test_bind_request_context(capturing_logger):
    """Test binding request_id to log context."""
    bind_request_context("test-request-123")
    structlog.get_logger().info("test message")

    entries = capturing_logger.calls
    assert len(entries) == 1
    assert entries[0].kwargs["request_id"] == "test-request-123"


def test_bind_request_context_with_none(capturing_logger):
    """Test that None request_id is not bound."""
    bind_request_context(None)
    structlog.get_logger().info("test message")

    assert "request_id" not in capturing_logger.calls[0].kwargs


def test_bind_user_context(capturing_logger):
    """User id and role are bound; the email never is."""
    user_id = uuid4()

    bind_user_context(user_id, "admin")
    structlog.get_logger().info("test message")

    kwargs = capturing_logger.calls[0].kwargs
    assert kwargs["user_id"] == str(user_id)
    assert kwargs["user_role"] == "admin"
    assert "email" not in kwargs


def test_clear_request_context(capturing_logger):
    bind_request_context("req-1")
    bind_user_context(uuid4(), "user")
    clear_request_context()
    structlog.get_logger().info("after clear")

    kwargs = capturing_logger.calls[0].kwargs
    assert "request_id" not in kwargs
    assert "user_id" not in kwargs


def test_bind_execution_context(capturing_logger):
    bind_execution_context("abc123", "bizminer")
    structlog.get_logger().info("webhook_rejected")

    kwargs = capturing_logger.calls[0].kwargs
    assert kwargs["execution_id"] == "abc123"
    assert kwargs["analysis_kind"] == "bizminer"
