"""Schema management for SQL-backed Shipment deployments."""

from protean.domain import Domain
from sqlalchemy import create_engine

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for provider in domain.providers.values():
        if provider.conn_info["provider"] in _SQL_PROVIDERS:
            yield provider


def setup_db(domain: Domain):
    """Create tables for every aggregate and projection on SQL providers."""
    with domain.domain_context():
        records = [
            *domain.registry.aggregates.values(),
            *domain.registry.projections.values(),
        ]
        for provider in _sql_providers(domain):
            # Building the DAO registers the table on the provider's metadata
            for record in records:
                if record.cls.meta_.provider == provider.name:
                    domain.repository_for(record.cls)._dao  # noqa: B018

            provider._metadata.create_all(create_engine(provider.conn_info["database_uri"]))


def drop_db(domain: Domain):
    """Drop all tables on SQL providers."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))
