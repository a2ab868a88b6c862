class ContactError(Exception):
    """Base error for the contact pipeline."""


class StorageError(ContactError):
    """A contact record could not be persisted."""


class SendError(ContactError):
    """A notification could not be delivered."""
