"""Agency Portal — Ad-Account Resolver."""

from sqlmodel import Session

from app.core.errors import MissingAccountId, NotFound
from app.models.account_models import ClientAccount

ACCOUNT_PREFIX = "act_"


def normalize_account_id(raw: str) -> str:
    """Trim and prefix with `act_` unless already present."""
    account_id = raw.strip()
    if not account_id.startswith(ACCOUNT_PREFIX):
        account_id = f"{ACCOUNT_PREFIX}{account_id}"
    return account_id


def resolve_ad_account(session: Session, client_id: str) -> str:
    """Return the canonical Meta account reference for a client."""
    client = session.get(ClientAccount, client_id)
    if client is None:
        raise NotFound(f"Client {client_id} not found")
    if not client.ad_account_id or not client.ad_account_id.strip():
        raise MissingAccountId(client_id)
    return normalize_account_id(client.ad_account_id)
