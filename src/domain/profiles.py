"""
Profile domain service - read and update registered identities.

Contact fields only; the verification flow owns the secret and code columns.
"""

from dataclasses import dataclass, replace

from .exceptions import NotFound, ValidationError
from .ports import IdentityRepository, ProfileUpdate
from .verification import normalize_email


@dataclass
class ProfileService:
    """Domain service for identity profiles."""

    repository: IdentityRepository

    def get_profile(self, identity_id: str) -> dict[str, str]:
        """
        Raises:
            NotFound: If no identity has this id
        """
        identity = self.repository.find_by_id(identity_id)
        if identity is None:
            raise NotFound(identity_id)
        return identity.public_profile()

    def update_profile(self, identity_id: str, update: ProfileUpdate) -> dict[str, str]:
        """
        Replace the contact fields of an identity.

        Raises:
            ValidationError: If any field is blank
            NotFound: If no identity has this id
            Conflict: If the email or phone number belongs to another identity
        """
        blank = [name for name, value in vars(update).items() if not value.strip()]
        if blank:
            raise ValidationError(", ".join(blank))
        update = replace(update, email=normalize_email(update.email))

        identity = self.repository.update_profile(identity_id, update)
        if identity is None:
            raise NotFound(identity_id)
        return identity.public_profile()
