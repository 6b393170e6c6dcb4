"""Django app configuration for accounts app."""

from typing import TYPE_CHECKING, override

from django.apps import AppConfig
from django.conf import settings

if TYPE_CHECKING:
    from server.apps.accounts.infrastructure.credential_store import (
        CredentialStore,
    )


class AccountsConfig(AppConfig):
    """Configuration for accounts app.

    Owns the credential store handle used for authentication tokens.
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.accounts'
    verbose_name = 'Accounts'

    credential_store: 'CredentialStore'

    @override
    def ready(self) -> None:
        """Create the credential store handle."""
        from server.apps.accounts.infrastructure.credential_store import (  # noqa: PLC0415
            CredentialStore,
        )

        self.credential_store = CredentialStore(settings.AUTH_TOKEN_CACHE)
