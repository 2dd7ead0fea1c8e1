"""Wiring of the store, session manager and operation components."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from grammar_practice.config.app_config import AppConfig
from grammar_practice.core.catalog import QuestionCatalog
from grammar_practice.core.recorder import ProgressRecorder
from grammar_practice.core.reporter import ProgressReporter
from grammar_practice.core.sessions import (
    JsonFileSessionStore,
    SessionManager,
    SessionStore,
    local_now,
)
from grammar_practice.db.workbook import SqliteWorkbook, TabularStore


@dataclass
class Services:
    """Everything an operation needs, built once per store."""

    store: TabularStore
    sessions: SessionManager
    catalog: QuestionCatalog
    recorder: ProgressRecorder
    reporter: ProgressReporter


def build_services(
    config: AppConfig,
    store: TabularStore | None = None,
    session_store: SessionStore | None = None,
    clock: Callable[[], datetime] = local_now,
) -> Services:
    """Build the operation components from configuration.

    Args:
        config: Application configuration
        store: Workbook to use; opened from the configured location if None
        session_store: Session storage; JSON file in the state dir if None
        clock: Current-time source shared by every component

    Raises:
        ConfigurationError: If no store is given and the location is unset or missing
    """
    if store is None:
        store = SqliteWorkbook(config.store.require_workbook_path())
    if session_store is None:
        session_store = JsonFileSessionStore(config.state_dir)

    sessions = SessionManager(
        store=store,
        session_store=session_store,
        email_domain=config.auth.email_domain,
        max_age=timedelta(hours=config.auth.session_max_age_hours),
        clock=clock,
    )
    tables = config.store.proficiency_tables

    return Services(
        store=store,
        sessions=sessions,
        catalog=QuestionCatalog(store, sessions),
        recorder=ProgressRecorder(store, sessions, tables),
        reporter=ProgressReporter(store, sessions, tables),
    )
