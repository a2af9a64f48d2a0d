"""Schema management for SQL-backed providers.

The memory provider needs no schema, so only sqlite and postgresql providers
are touched here.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    return [
        (name, provider)
        for name, provider in domain.providers.items()
        if provider.conn_info["provider"] in SQL_PROVIDERS
    ]


def setup_db(domain: Domain) -> list[str]:
    """Create tables for every aggregate and entity on SQL providers.

    Returns the names of the providers whose schema was created.
    """
    created = []
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])

            # Touching the DAO registers the model with the provider's metadata
            for _, record in domain.registry.aggregates.items():
                if record.cls.meta_.provider == name:
                    domain.repository_for(record.cls)._dao  # noqa: B018

            for _, record in domain.registry.entities.items():
                if record.cls.meta_.provider == name:
                    domain.repository_for(record.cls)._dao  # noqa: B018

            provider._metadata.create_all(engine)
            created.append(name)
    return created


def drop_db(domain: Domain) -> list[str]:
    """Drop tables on SQL providers. Returns the names of the providers dropped."""
    dropped = []
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)
            dropped.append(name)
    return dropped
