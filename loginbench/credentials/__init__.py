from .selector import CredentialSelector, EmptyCredentialPoolError
from .types import Credential

__all__ = ["Credential", "CredentialSelector", "EmptyCredentialPoolError"]
