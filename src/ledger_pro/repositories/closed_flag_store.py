import json
from pathlib import Path
from typing import Dict

from ledger_pro.domain.errors import StoreError
from ledger_pro.logging_setup import get_logger

logger = get_logger(__name__)


class ClosedFlagStore:
    """
    Client-local record of which accounts are closed.

    Backed by a JSON object file mapping account id to a boolean. The file
    is read once at construction and rewritten on every toggle. Only
    toggle() changes a flag; everything else reads.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._flags: Dict[str, bool] = self._load()

    def _load(self) -> Dict[str, bool]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Could not read closed accounts from {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StoreError(f"Closed accounts file {self.path} must hold a JSON object")
        return {str(key): bool(value) for key, value in data.items()}

    def _flush(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(self._flags, f, indent=2, sort_keys=True)
        except OSError as e:
            raise StoreError(f"Could not write closed accounts to {self.path}: {e}") from e

    def is_closed(self, account_id: str) -> bool:
        """Return the closed flag, False for accounts never toggled"""
        return self._flags.get(account_id, False)

    def toggle(self, account_id: str) -> bool:
        """
        Flip an account's closed flag and persist it.

        Args:
            account_id: Account to open or close

        Returns:
            The new closed flag
        """
        closed = not self.is_closed(account_id)
        self._flags[account_id] = closed
        try:
            self._flush()
        except StoreError:
            self._flags[account_id] = not closed
            raise
        logger.info("Account %s is now %s", account_id, "closed" if closed else "open")
        return closed

    def snapshot(self) -> Dict[str, bool]:
        """Copy of the current flags"""
        return dict(self._flags)
