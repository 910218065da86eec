"""App Store Connect credential storage using the system keyring.

The three credential fields are serialized as one JSON blob and stored
under a single keyring entry (Keychain on macOS, SecretService on Linux,
Credential Manager on Windows). There is no schema versioning.
"""

from dataclasses import asdict, dataclass

import keyring
import keyring.errors
import orjson

from release_desk.constants import KEYRING_CONFIG_KEY, KEYRING_SERVICE
from release_desk.exceptions import ConfigError
from release_desk.logger import get_logger

logger = get_logger(__name__)


@dataclass(slots=True)
class AppStoreConnectConfig:
    """API key material for App Store Connect.

    Attributes:
        issuer_id: Issuer UUID from the Users and Access page
        key_id: Identifier of the API key
        private_key: Contents of the downloaded ``.p8`` key file

    """

    issuer_id: str = ""
    key_id: str = ""
    private_key: str = ""

    @property
    def is_valid(self) -> bool:
        """Return True when all three fields are non-empty."""
        return bool(self.issuer_id and self.key_id and self.private_key)

    def to_json(self) -> bytes:
        """Serialize to the stored JSON blob."""
        return orjson.dumps(
            {
                "issuerID": self.issuer_id,
                "privateKeyID": self.key_id,
                "privateKey": self.private_key,
            }
        )

    @classmethod
    def from_json(cls, data: str | bytes) -> "AppStoreConnectConfig":
        """Deserialize the stored JSON blob.

        Raises:
            ConfigError: If the blob is not a JSON object

        """
        try:
            raw = orjson.loads(data)
        except orjson.JSONDecodeError as e:
            msg = "Stored credentials are not valid JSON"
            raise ConfigError(msg) from e
        if not isinstance(raw, dict):
            msg = "Stored credentials have an unexpected shape"
            raise ConfigError(msg)
        return cls(
            issuer_id=str(raw.get("issuerID", "")),
            key_id=str(raw.get("privateKeyID", "")),
            private_key=str(raw.get("privateKey", "")),
        )

    def redacted(self) -> dict[str, str]:
        """Return a loggable view without the private key."""
        data = asdict(self)
        data["private_key"] = (
            f"<{len(self.private_key)} chars>" if self.private_key else ""
        )
        return data


class KeyringCredentialStore:
    """Persist AppStoreConnectConfig as a JSON blob in the keyring."""

    def __init__(
        self,
        service: str = KEYRING_SERVICE,
        username: str = KEYRING_CONFIG_KEY,
    ) -> None:
        """Initialize the credential store.

        Args:
            service: The service name for keyring storage.
            username: The entry name for keyring storage.

        """
        self.service = service
        self.username = username

    def load(self) -> AppStoreConnectConfig:
        """Load stored credentials.

        Returns:
            Stored config, or an empty (invalid) config when nothing is
            stored or the keyring is unavailable.

        """
        try:
            blob = keyring.get_password(self.service, self.username)
        except keyring.errors.KeyringError:
            logger.debug("Keyring access failed")
            return AppStoreConnectConfig()

        if not blob:
            logger.debug("No credentials stored in keyring")
            return AppStoreConnectConfig()

        try:
            return AppStoreConnectConfig.from_json(blob)
        except ConfigError as e:
            logger.warning("Ignoring stored credentials: %s", e)
            return AppStoreConnectConfig()

    def save(self, config: AppStoreConnectConfig) -> None:
        """Store credentials.

        Args:
            config: Credentials to store

        Raises:
            ConfigError: If the config is incomplete or the keyring
                rejects the write

        """
        if not config.is_valid:
            msg = "Issuer ID, key ID and private key are all required"
            raise ConfigError(msg)
        try:
            keyring.set_password(
                self.service, self.username, config.to_json().decode()
            )
        except keyring.errors.KeyringError as e:
            logger.exception("Failed to save credentials to keyring")
            msg = f"Keyring write failed: {e}"
            raise ConfigError(msg) from e
        logger.debug("Credentials saved to keyring (values hidden)")

    def clear(self) -> None:
        """Remove stored credentials; missing entries are ignored."""
        try:
            keyring.delete_password(self.service, self.username)
        except keyring.errors.PasswordDeleteError:
            logger.debug("No credentials found in keyring to delete")
        except keyring.errors.KeyringError as e:
            msg = f"Keyring delete failed: {e}"
            raise ConfigError(msg) from e
