"""Secret key provisioning."""

from .key_provisioner import ALPHABET, SECRET_KEY_LENGTH, SecretKeyProvisioner, ensure_key_pair

__all__ = ["ALPHABET", "SECRET_KEY_LENGTH", "SecretKeyProvisioner", "ensure_key_pair"]
