"""
Store assembly from settings.

``build_store`` is the single place that turns LedgerSettings into a ready
LedgerStore: it configures logging, picks the policy, and for the SQL
backend builds the engine and schema.
"""

from __future__ import annotations

from restoration_kernel.config import LedgerSettings
from restoration_kernel.domain.policy import LedgerPolicy, PermissivePolicy, StrictPolicy
from restoration_kernel.logging_config import configure_logging, get_logger
from restoration_kernel.store.base import LedgerStore
from restoration_kernel.store.memory import InMemoryLedgerStore
from restoration_kernel.store.sql import SqlLedgerStore

logger = get_logger("bootstrap")


def build_policy(settings: LedgerSettings) -> LedgerPolicy:
    if settings.policy == "strict":
        return StrictPolicy(
            cap_at_goal=settings.cap_funding_at_goal,
            owner_only_minting=settings.owner_only_minting,
        )
    return PermissivePolicy()


def build_store(settings: LedgerSettings | None = None) -> LedgerStore:
    """Configure logging and return the store described by ``settings``."""
    settings = settings or LedgerSettings()
    configure_logging(level=settings.log_level_number)

    policy = build_policy(settings)
    if settings.backend == "sql":
        store: LedgerStore = SqlLedgerStore.from_url(
            settings.database_url, policy, echo=settings.echo
        )
    else:
        store = InMemoryLedgerStore(policy)

    logger.info("ledger_store_ready", extra=store.describe())
    return store
