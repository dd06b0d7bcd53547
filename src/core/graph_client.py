"""
MS Graph client setup with lazy initialization.
"""

from azure.identity import ClientSecretCredential
from msgraph import GraphServiceClient

from core import config
from core.errors import ConfigError

_credential: ClientSecretCredential | None = None
_graph_client: GraphServiceClient | None = None


def get_credential() -> ClientSecretCredential:
    """
    Get or create the client-credentials token source.

    Raises:
        ConfigError: if any of the app registration values is unset
    """
    global _credential
    if _credential is None:
        required = {
            "MICROSOFT_GRAPH_TENANT_ID": config.GRAPH_TENANT_ID,
            "MICROSOFT_GRAPH_APP_ID": config.GRAPH_APP_ID,
            "MICROSOFT_GRAPH_CLIENT_SECRET": config.GRAPH_CLIENT_SECRET,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ConfigError(f"Missing Graph credentials: {', '.join(missing)}")

        _credential = ClientSecretCredential(
            tenant_id=config.GRAPH_TENANT_ID,
            client_id=config.GRAPH_APP_ID,
            client_secret=config.GRAPH_CLIENT_SECRET,
        )
    return _credential


def get_graph_client() -> GraphServiceClient:
    """Get or create the MS Graph client (lazy initialization)."""
    global _graph_client
    if _graph_client is None:
        _graph_client = GraphServiceClient(credentials=get_credential(), scopes=[config.GRAPH_SCOPE])
    return _graph_client
