#!/usr/bin/env python3
"""
Upload credential resolution.

Upload tokens are kept in a YAML file keyed by commit author email, e.g.

    Alice@Example.com: 3f2a...
    default: 91bc...

Keys are matched case-insensitively. When the author has no entry of their
own the "default" entry is used; when that is missing too, resolution fails
with CredentialNotFound.
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .aes import decrypt_token, is_encrypted
from .errors import ConfigError, CredentialNotFound
from .utils import output_log
from .vcs import commit_author_email

DEFAULT_IDENTITY = "default"


def normalize_identity(identity: str) -> str:
    return identity.rstrip().lower()


def build_credential_table(raw: Mapping[Any, Any]) -> Dict[str, str]:
    """Normalize the keys of a raw credential mapping.

    Entries are applied in order, so when two keys normalize to the same
    identity the later one wins.
    """
    table: Dict[str, str] = {}
    for identity, token in raw.items():
        # YAML turns empty values into None and bare digits into numbers
        if not isinstance(token, str):
            raise ConfigError(f"Credential for '{identity}' must be a string, got {type(token).__name__}")
        table[normalize_identity(str(identity))] = token.rstrip()
    return table


def resolve_credential(raw: Mapping[Any, Any], identity: str, default_key: str = DEFAULT_IDENTITY) -> str:
    """Resolve the credential for identity, falling back to the default entry."""
    table = build_credential_table(raw)

    key = normalize_identity(identity)
    if key in table:
        return table[key]

    default = normalize_identity(default_key)
    if default in table:
        return table[default]

    raise CredentialNotFound(identity)


def load_raw_credentials(path: Path) -> Mapping[Any, Any]:
    """Load the raw author -> token mapping from a YAML file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read credential file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Credential file {path} must be a mapping of author to token")
    return data


def commit_author_credential(credentials_file: Path, secret_key: Optional[str] = None) -> str:
    """Upload token for the author of the last commit."""
    author = commit_author_email()
    output_log(f"Resolving upload credential for {author}")

    token = resolve_credential(load_raw_credentials(credentials_file), author)
    if is_encrypted(token):
        if not secret_key:
            raise ConfigError("Credential token is encrypted but no CREDENTIALS_SECRET_KEY is set")
        token = decrypt_token(token, secret_key)
    return token
