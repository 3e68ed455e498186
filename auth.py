"""OAuth2 credential loading, refresh and caching for the Google Docs and Drive APIs."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from google.auth.exceptions import GoogleAuthError, RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from config_loader import DEFAULT_SCOPES, get_nested

logger = logging.getLogger('gdocs_markdown_exporter.auth')

AUTH_URI = 'https://accounts.google.com/o/oauth2/auth'
TOKEN_URI = 'https://oauth2.googleapis.com/token'


class AuthError(Exception):
    """Raised when OAuth credentials cannot be obtained."""
    pass


def load_credentials(config: Dict[str, Any]) -> Credentials:
    """
    Return valid user credentials, running the browser flow only when needed.

    The cached token is reused when valid, refreshed when expired, and replaced
    through the installed-app flow when missing or no longer refreshable.

    Args:
        config: Configuration dictionary (google.* settings)

    Returns:
        Authorized google.oauth2 Credentials

    Raises:
        AuthError: If the authorization flow fails
    """
    scopes = get_nested(config, 'google.scopes', DEFAULT_SCOPES)
    token_path = Path(os.path.expanduser(get_nested(config, 'google.token_file', '~/.credentials/token.json')))

    credentials = _load_cached_token(token_path, scopes)

    if credentials is not None and credentials.valid:
        logger.debug(f"Using cached token from {token_path}")
        return credentials

    if credentials is not None and credentials.expired and credentials.refresh_token:
        try:
            credentials.refresh(Request())
            logger.info("Refreshed expired access token")
            save_credentials(credentials, token_path)
            return credentials
        except RefreshError as e:
            logger.warning(f"Token refresh failed, re-authorizing: {e}")

    credentials = _run_authorization_flow(config, scopes)
    save_credentials(credentials, token_path)
    return credentials


def save_credentials(credentials: Credentials, token_path: Path) -> None:
    """Write the token JSON, creating its directory with owner-only permissions."""
    token_path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    logger.info(f"Saving credential file to: {token_path}")
    token_path.write_text(credentials.to_json(), encoding='utf-8')


def _load_cached_token(token_path: Path, scopes: List[str]) -> Optional[Credentials]:
    if not token_path.exists():
        logger.debug(f"No cached token at {token_path}")
        return None
    try:
        return Credentials.from_authorized_user_file(str(token_path), scopes)
    except ValueError as e:
        logger.warning(f"Ignoring unreadable token file {token_path}: {e}")
        return None


def _run_authorization_flow(config: Dict[str, Any], scopes: List[str]) -> Credentials:
    client_config = {
        'installed': {
            'client_id': get_nested(config, 'google.client_id'),
            'client_secret': get_nested(config, 'google.client_secret'),
            'auth_uri': AUTH_URI,
            'token_uri': TOKEN_URI,
            'redirect_uris': ['http://localhost'],
        }
    }
    port = _redirect_port(config)

    logger.info(f"Starting local web server on port {port} for authorization")
    try:
        flow = InstalledAppFlow.from_client_config(client_config, scopes)
        return flow.run_local_server(
            port=port,
            open_browser=True,
            authorization_prompt_message='Go to the following link in your browser:\n{url}',
            success_message='Authorization successful, you can close this window.'
        )
    except (GoogleAuthError, ValueError, OSError) as e:
        raise AuthError(f"Unable to retrieve token from web: {e}") from e


def _redirect_port(config: Dict[str, Any]) -> int:
    """Port of GOOGLE_REDIRECT_URI when it is set, else google.redirect_port."""
    redirect_uri = get_nested(config, 'google.redirect_uri')
    if redirect_uri and '${' not in redirect_uri:
        parsed = urlparse(redirect_uri)
        if parsed.port:
            return parsed.port
    return get_nested(config, 'google.redirect_port', 8080)


__all__ = ['AuthError', 'load_credentials', 'save_credentials']
