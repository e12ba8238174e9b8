from tlearn.services.completion import complete_task
from tlearn.services.credentials import CredentialKind, Principal, extract_bearer, resolve_credential

__all__ = ["complete_task", "CredentialKind", "Principal", "extract_bearer", "resolve_credential"]
