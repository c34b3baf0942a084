"""Service container.

Built once at process start and handed to the RPC context, the web app and
the CLI. Holds the single ``Database`` and the managers that share it.
"""

from dataclasses import dataclass
from typing import Optional

from .access.identity import FirebaseIdentityVerifier, IdentityVerifier
from .access.users import UserManager
from .access.whitelist import WhitelistManager
from .collections.manager import CollectionManager
from .config import Config
from .db.sqlite import Database
from .kindle.importer import KindleImporter
from .quotes.manager import QuoteManager


@dataclass
class Services:
    """Explicitly constructed dependencies for request handlers."""

    config: Config
    db: Database
    verifier: IdentityVerifier
    users: UserManager
    whitelist: WhitelistManager
    collections: CollectionManager
    quotes: QuoteManager
    kindle: KindleImporter

    @classmethod
    def create(
        cls,
        config: Config,
        db: Optional[Database] = None,
        verifier: Optional[IdentityVerifier] = None,
    ) -> "Services":
        """Wire up all services.

        Args:
            config: Application configuration
            db: Database to use; one is opened at ``config.db_path`` otherwise
            verifier: Identity verifier; Firebase by default

        Returns:
            Services with tables created
        """
        if db is None:
            db = Database(config.db_path)
        db.create_tables()

        if verifier is None:
            verifier = FirebaseIdentityVerifier(
                credentials_path=config.firebase_credentials,
                project_id=config.firebase_project_id,
            )

        quotes = QuoteManager(db)
        return cls(
            config=config,
            db=db,
            verifier=verifier,
            users=UserManager(db, owner_identity_id=config.owner_identity_id),
            whitelist=WhitelistManager(db),
            collections=CollectionManager(db),
            quotes=quotes,
            kindle=KindleImporter(db, quotes),
        )
