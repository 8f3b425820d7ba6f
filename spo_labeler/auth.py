"""
Authentication module using Microsoft Identity (MSAL).
Signs the operator in once and hands out tokens for Graph and SharePoint.
"""
import json
import logging
import os
from typing import List, Optional

import msal

from spo_labeler.config import AppConfig
from spo_labeler.errors import ConnectionFailedError


class AuthManager:
    """Delegated authentication for a single operator account.

    The first token is obtained with an interactive browser login hinted with
    the operator's UPN, so the identity provider can run MFA. Later tokens for
    other resources (SharePoint admin, the target site) are acquired silently
    from the same account. The MSAL SerializableTokenCache is persisted to
    `config.token_cache_path` so repeated runs skip the browser.
    """

    def __init__(self, config: AppConfig, app: Optional[msal.PublicClientApplication] = None):
        self.config = config
        self.cache_path = config.token_cache_path
        self.token_cache = msal.SerializableTokenCache()
        self.logger = logging.getLogger("AuthManager")
        # Load token cache from file if exists (text mode)
        try:
            if os.path.exists(self.cache_path):
                with open(self.cache_path, "r", encoding="utf-8") as f:
                    data = f.read()
                    if data:
                        self.token_cache.deserialize(data)
        except (OSError, ValueError) as exc:
            self.logger.warning("Ignoring unreadable token cache %s: %s", self.cache_path, exc)

        self.app = app or msal.PublicClientApplication(
            config.client_id,
            authority=config.authority,
            token_cache=self.token_cache,
        )
        self.username: Optional[str] = None

    def _save_cache(self) -> None:
        if not self.token_cache.has_state_changed:
            return
        try:
            with open(self.cache_path, "w", encoding="utf-8") as f:
                f.write(self.token_cache.serialize())
        except OSError as exc:
            self.logger.warning("Could not persist token cache: %s", exc)

    def _account(self) -> Optional[dict]:
        accounts = self.app.get_accounts(username=self.username) if self.username else self.app.get_accounts()
        return accounts[0] if accounts else None

    def _log_failure(self, what: str, result) -> None:
        try:
            self.logger.error("%s failed, MSAL result: %s", what, json.dumps(result, indent=2))
        except (TypeError, ValueError):
            self.logger.error("%s failed, MSAL result: %s", what, result)

    def login(self, user_principal_name: str, scopes: List[str]) -> dict:
        """Sign `user_principal_name` in, silently if the cache allows it."""
        self.username = user_principal_name
        account = self._account()
        if account:
            result = self.app.acquire_token_silent(scopes, account=account)
            if result and "access_token" in result:
                self.logger.info("Reusing cached sign-in for %s", user_principal_name)
                self._save_cache()
                return result

        self.logger.info("Opening interactive sign-in for %s", user_principal_name)
        try:
            result = self.app.acquire_token_interactive(scopes=scopes, login_hint=user_principal_name)
        except Exception as exc:
            self.logger.debug("acquire_token_interactive raised: %s", exc)
            raise ConnectionFailedError(f"Interactive login failed: {exc}") from exc

        if result and "access_token" in result:
            self._save_cache()
            return result
        self._log_failure("acquire_token_interactive", result)
        raise ConnectionFailedError(
            f"Interactive login failed: {result.get('error_description') if result else 'no result'}"
        )

    def get_token(self, scopes: List[str]) -> str:
        """Return an access token for `scopes` using the signed-in account."""
        if self.username is None:
            raise ConnectionFailedError("login() must be called before requesting tokens")
        account = self._account()
        result = self.app.acquire_token_silent(scopes, account=account) if account else None
        if not result or "access_token" not in result:
            # Consent for a new resource may still require the browser.
            try:
                result = self.app.acquire_token_interactive(scopes=scopes, login_hint=self.username)
            except Exception as exc:
                raise ConnectionFailedError(f"Interactive login for {scopes[0]} failed: {exc}") from exc
        if not result or "access_token" not in result:
            self._log_failure("token acquisition for %s" % " ".join(scopes), result)
            raise ConnectionFailedError(
                f"Could not obtain a token for {scopes[0]}: "
                f"{result.get('error_description') if result else 'no result'}"
            )
        self._save_cache()
        return result["access_token"]
